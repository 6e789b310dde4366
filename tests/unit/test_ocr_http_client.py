"""Unit tests for the remote OCR text detector."""

import httpx
import pytest

from po_intake.pipeline.clients.base import Deadline
from po_intake.pipeline.clients.ocr_http_client import (
    HttpTextDetector,
    parse_ocr_response,
)
from po_intake.pipeline.core.exceptions import ExternalServiceError


def _detector(handler) -> HttpTextDetector:
    return HttpTextDetector(
        base_url="https://ocr.example.com/",
        transport=httpx.MockTransport(handler),
    )


class TestHttpTextDetector:
    @pytest.mark.asyncio
    async def test_posts_image_and_parses_result(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = request.read()
            return httpx.Response(200, json={"text": "PC61 Black L 12", "confidence": 88.5})

        detector = _detector(handler)
        result = await detector.detect_text(b"PNGDATA", Deadline.after(5))
        await detector.aclose()

        assert result.text == "PC61 Black L 12"
        assert result.confidence == 88.5
        assert seen["path"] == "/ocr"
        assert b"PNGDATA" in seen["body"]

    @pytest.mark.asyncio
    async def test_http_error_raises_external_service_error(self):
        detector = _detector(lambda request: httpx.Response(500, text="engine down"))

        with pytest.raises(ExternalServiceError) as exc_info:
            await detector.detect_text(b"img", Deadline.after(5))

        assert "HTTP 500" in exc_info.value.message
        assert "engine down" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_timeout_maps_to_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        detector = _detector(handler)
        with pytest.raises(ExternalServiceError) as exc_info:
            await detector.detect_text(b"img", Deadline.after(5))
        assert exc_info.value.http_status == 504

    @pytest.mark.asyncio
    async def test_expired_deadline_short_circuits(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"text": "x", "confidence": 90})

        detector = _detector(handler)
        with pytest.raises(ExternalServiceError):
            await detector.detect_text(b"img", Deadline.after(-1))
        assert calls == []

    def test_missing_base_url_rejected(self):
        with pytest.raises(ValueError):
            HttpTextDetector(base_url="")


class TestParseOcrResponse:
    def test_nested_result(self):
        result = parse_ocr_response({"result": {"text": "abc", "confidence": 70}})
        assert result.text == "abc"
        assert result.confidence == 70.0

    def test_confidence_clamped(self):
        assert parse_ocr_response({"text": "a", "confidence": 250}).confidence == 100.0

    def test_missing_text(self):
        with pytest.raises(ExternalServiceError):
            parse_ocr_response({"confidence": 50})
