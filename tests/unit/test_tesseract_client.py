"""Unit tests for rebuilding text from tesseract word data."""

import pytest

from po_intake.pipeline.clients import tesseract_client
from po_intake.pipeline.clients.base import Deadline
from po_intake.pipeline.clients.tesseract_client import (
    TesseractTextDetector,
    words_to_text,
)
from po_intake.pipeline.core.exceptions import ExternalServiceError
from tests.fakes import png_bytes

WORD_DATA = {
    "text": ["", "PC61", "Black", "L", "12", "", "Thanks"],
    "conf": ["-1", "90", "80", "70", "60", "-1", "100"],
    "block_num": [1, 1, 1, 1, 1, 2, 2],
    "par_num": [1, 1, 1, 1, 1, 1, 1],
    "line_num": [0, 1, 1, 1, 1, 0, 1],
}


class TestWordsToText:
    def test_lines_rebuilt_in_reading_order(self):
        result = words_to_text(WORD_DATA)
        assert result.text == "PC61 Black L 12\nThanks"

    def test_confidence_is_mean_of_words(self):
        assert words_to_text(WORD_DATA).confidence == pytest.approx(80.0)

    def test_no_words(self):
        result = words_to_text({"text": [], "conf": []})
        assert result.text == ""
        assert result.confidence == 0.0


class TestTesseractTextDetector:
    @pytest.mark.asyncio
    async def test_uses_remaining_deadline_as_timeout(self, monkeypatch):
        seen = {}

        def fake_image_to_data(image, lang, config, output_type, timeout):
            seen["timeout"] = timeout
            seen["lang"] = lang
            return WORD_DATA

        monkeypatch.setattr(tesseract_client.pytesseract, "image_to_data", fake_image_to_data)

        result = await TesseractTextDetector(language="eng").detect_text(
            png_bytes(), Deadline.after(10)
        )

        assert result.text.startswith("PC61")
        assert 0 < seen["timeout"] <= 10
        assert seen["lang"] == "eng"

    @pytest.mark.asyncio
    async def test_tesseract_timeout_maps_to_external_timeout(self, monkeypatch):
        def fake_image_to_data(*args, **kwargs):
            raise RuntimeError("Tesseract process timeout")

        monkeypatch.setattr(tesseract_client.pytesseract, "image_to_data", fake_image_to_data)

        with pytest.raises(ExternalServiceError) as exc_info:
            await TesseractTextDetector().detect_text(png_bytes(), Deadline.after(10))
        assert exc_info.value.http_status == 504
