"""Remote text detector: posts page images to an OCR service over HTTP.

Expected contract:
- POST {base_url}/ocr  multipart field `file` (image/png)
- 200 -> {"text": "...", "confidence": 87.5}
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from po_intake.pipeline.clients.base import Deadline, DetectedText
from po_intake.pipeline.config.constants import ERROR_BODY_MAX_CHARS
from po_intake.pipeline.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


def parse_ocr_response(data: object) -> DetectedText:
    """Normalize the service JSON into DetectedText."""
    if not isinstance(data, dict):
        raise ExternalServiceError(
            "ocr", "error", message="OCR response is not a JSON object"
        )
    text = data.get("text")
    if text is None and isinstance(data.get("result"), dict):
        text = data["result"].get("text")
        data = data["result"]
    if not isinstance(text, str):
        raise ExternalServiceError("ocr", "error", message="OCR response missing text")
    try:
        confidence = float(data.get("confidence", 0.0))
    except (TypeError, ValueError):
        confidence = 0.0
    return DetectedText(text=text, confidence=min(max(confidence, 0.0), 100.0))


class HttpTextDetector:
    name = "http"

    def __init__(
        self,
        base_url: str,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not base_url:
            raise ValueError("OCR base_url is not configured")
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url, verify=verify_ssl, transport=transport
        )

    async def detect_text(self, image_bytes: bytes, deadline: Deadline) -> DetectedText:
        timeout = deadline.remaining()
        if timeout <= 0:
            raise ExternalServiceError("ocr", "timeout")
        try:
            resp = await self._client.post(
                "/ocr",
                files={"file": ("page.png", image_bytes, "image/png")},
                timeout=timeout,
            )
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            raise ExternalServiceError("ocr", "timeout") from e
        except httpx.HTTPStatusError as e:
            body = e.response.text[:ERROR_BODY_MAX_CHARS]
            logger.warning(
                "OCR service returned error",
                extra={"service": "ocr", "http_status": e.response.status_code},
            )
            raise ExternalServiceError(
                "ocr",
                "error",
                message=f"OCR service HTTP {e.response.status_code}: {body}",
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                "ocr", "unavailable", message=f"OCR service unreachable: {e}"
            ) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalServiceError(
                "ocr", "error", message="OCR response is not valid JSON"
            ) from e
        return parse_ocr_response(data)

    async def aclose(self) -> None:
        await self._client.aclose()
