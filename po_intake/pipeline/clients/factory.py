"""Selects the configured text-detector backend."""

import logging

from po_intake.pipeline.clients.base import TextDetector
from po_intake.pipeline.clients.ocr_http_client import HttpTextDetector
from po_intake.pipeline.clients.tesseract_client import TesseractTextDetector

logger = logging.getLogger(__name__)


def build_text_detector(ocr_settings) -> TextDetector:
    backend = ocr_settings.OCR_BACKEND
    if backend == "http":
        detector = HttpTextDetector(
            base_url=ocr_settings.OCR_BASE_URL,
            verify_ssl=ocr_settings.OCR_VERIFY_SSL,
        )
    elif backend == "tesseract":
        detector = TesseractTextDetector(language=ocr_settings.OCR_LANGUAGE)
    else:
        raise ValueError(f"Unknown OCR backend: {backend!r}")

    logger.info("Text detector configured", extra={"backend": detector.name})
    return detector
