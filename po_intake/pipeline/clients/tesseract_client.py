"""Local text detector backed by the tesseract binary via pytesseract."""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Any

import pytesseract
from PIL import Image

from po_intake.pipeline.clients.base import Deadline, DetectedText
from po_intake.pipeline.config.constants import OCR_LANGUAGE, OCR_TESSERACT_CONFIG
from po_intake.pipeline.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


def words_to_text(data: dict[str, list[Any]]) -> DetectedText:
    """Rebuild line-oriented text and mean word confidence from image_to_data.

    Words are grouped by (block, paragraph, line) in reading order; entries
    with confidence -1 are layout rows, not words.
    """
    lines: dict[tuple[int, int, int], list[str]] = {}
    confidences: list[float] = []

    for i, word in enumerate(data.get("text", [])):
        word = (word or "").strip()
        try:
            conf = float(data["conf"][i])
        except (KeyError, IndexError, TypeError, ValueError):
            conf = -1.0
        if not word or conf < 0:
            continue
        key = (
            int(data["block_num"][i]),
            int(data["par_num"][i]),
            int(data["line_num"][i]),
        )
        lines.setdefault(key, []).append(word)
        confidences.append(conf)

    text = "\n".join(" ".join(words) for _, words in sorted(lines.items()))
    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return DetectedText(text=text, confidence=round(confidence, 2))


class TesseractTextDetector:
    name = "tesseract"

    def __init__(self, language: str = OCR_LANGUAGE, config: str = OCR_TESSERACT_CONFIG):
        self.language = language
        self.config = config

    def _recognize(self, image_bytes: bytes, timeout: float) -> DetectedText:
        with Image.open(io.BytesIO(image_bytes)) as img:
            data = pytesseract.image_to_data(
                img.convert("RGB"),
                lang=self.language,
                config=self.config,
                output_type=pytesseract.Output.DICT,
                timeout=timeout,
            )
        return words_to_text(data)

    async def detect_text(self, image_bytes: bytes, deadline: Deadline) -> DetectedText:
        timeout = deadline.remaining()
        if timeout <= 0:
            raise ExternalServiceError("tesseract", "timeout")
        try:
            # tesseract kills its subprocess once `timeout` elapses
            return await asyncio.to_thread(self._recognize, image_bytes, timeout)
        except RuntimeError as e:
            if "timeout" in str(e).lower():
                raise ExternalServiceError("tesseract", "timeout") from e
            raise
        except pytesseract.TesseractNotFoundError as e:
            raise ExternalServiceError(
                "tesseract", "unavailable", message="tesseract binary not found"
            ) from e

    async def aclose(self) -> None:
        return None
