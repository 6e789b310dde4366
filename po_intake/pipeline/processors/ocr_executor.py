"""
Per-page text recognition under a deadline.

Each page call is wrapped in `asyncio.wait_for` so a stuck backend is
cancelled once the deadline passes. Failures become page-level records;
nothing here raises.
"""

from __future__ import annotations

import asyncio
import logging
import time

from po_intake.pipeline.clients.base import Deadline, TextDetector
from po_intake.pipeline.config.constants import OCR_CONCURRENCY, OCR_TIMEOUT_SECONDS
from po_intake.pipeline.errors.codes import PageErrorType
from po_intake.pipeline.models.dto import (
    OCRPageResult,
    PageImage,
    PageOutcome,
    PageProcessingError,
    outcome_page_number,
)

logger = logging.getLogger(__name__)


def _page_error(page_number: int, message: str) -> PageProcessingError:
    return PageProcessingError(
        page_number=page_number,
        type=PageErrorType.PAGE_PROCESSING_ERROR,
        message=message,
    )


async def run_ocr_on_page(
    detector: TextDetector,
    page: PageImage,
    deadline: Deadline,
) -> PageOutcome:
    """Recognize one page; returns OCRPageResult or PageProcessingError."""
    try:
        image_bytes = await asyncio.to_thread(page.image_path.read_bytes)
    except OSError as e:
        return _page_error(page.index, f"Page image could not be read: {e.strerror or e}")
    if not image_bytes:
        return _page_error(page.index, "Page image is empty")

    started = time.perf_counter()
    try:
        detected = await asyncio.wait_for(
            detector.detect_text(image_bytes, deadline),
            timeout=deadline.remaining(),
        )
    except asyncio.TimeoutError:
        logger.warning(
            "OCR timeout",
            extra={"page_number": page.index, "backend": detector.name},
        )
        return _page_error(page.index, f"OCR timeout for page {page.index}")
    except Exception as e:
        logger.warning(
            "OCR failed: %s",
            e,
            extra={"page_number": page.index, "backend": detector.name},
        )
        return _page_error(page.index, str(e) or type(e).__name__)

    logger.info(
        "OCR page done",
        extra={
            "page_number": page.index,
            "backend": detector.name,
            "duration_ms": int((time.perf_counter() - started) * 1000),
        },
    )
    return OCRPageResult(
        page_index=page.index,
        text=detected.text,
        confidence=float(detected.confidence),
    )


async def run_ocr_on_pages(
    detector: TextDetector,
    pages: list[PageImage],
    *,
    timeout_seconds: float = OCR_TIMEOUT_SECONDS,
    concurrency: int = OCR_CONCURRENCY,
) -> list[PageOutcome]:
    """Run OCR over all pages with bounded parallelism.

    Every page gets its own deadline, started when its slot is acquired.
    Results are sorted by page index before returning.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _one(page: PageImage) -> PageOutcome:
        async with semaphore:
            return await run_ocr_on_page(detector, page, Deadline.after(timeout_seconds))

    outcomes = await asyncio.gather(*(_one(page) for page in pages))
    return sorted(outcomes, key=outcome_page_number)
