"""Merge per-page OCR outcomes into one text blob and one confidence."""

import logging

from po_intake.pipeline.config.constants import MIN_OCR_CONFIDENCE, PAGE_SEPARATOR
from po_intake.pipeline.core.exceptions import NoPagesProcessed
from po_intake.pipeline.errors.codes import PageErrorType
from po_intake.pipeline.models.dto import (
    AggregatedResult,
    OCRPageResult,
    PageOutcome,
    PageProcessingError,
    outcome_page_number,
)

logger = logging.getLogger(__name__)


def aggregate_pages(
    outcomes: list[PageOutcome],
    *,
    min_confidence: float = MIN_OCR_CONFIDENCE,
) -> AggregatedResult:
    """
    Combine page outcomes in ascending page order.

    Blank pages are dropped with an EMPTY_PAGE record; pages below
    `min_confidence` are kept but flagged LOW_CONFIDENCE; failed pages pass
    their record through.

    Raises:
        NoPagesProcessed: no page contributed text
    """
    included: list[OCRPageResult] = []
    page_errors: list[PageProcessingError] = []

    for outcome in sorted(outcomes, key=outcome_page_number):
        if isinstance(outcome, PageProcessingError):
            page_errors.append(outcome)
            continue

        if not outcome.text.strip():
            page_errors.append(
                PageProcessingError(
                    page_number=outcome.page_index,
                    type=PageErrorType.EMPTY_PAGE,
                    message=f"No text detected on page {outcome.page_index}",
                )
            )
            continue

        if outcome.confidence < min_confidence:
            page_errors.append(
                PageProcessingError(
                    page_number=outcome.page_index,
                    type=PageErrorType.LOW_CONFIDENCE,
                    message=(
                        f"Low OCR confidence ({outcome.confidence:.1f}%) "
                        f"on page {outcome.page_index}"
                    ),
                    confidence=outcome.confidence,
                )
            )
        included.append(outcome)

    if not included:
        logger.warning(
            "No pages produced usable text",
            extra={"error_code": "NO_PAGES_PROCESSED", "page_count": len(outcomes)},
        )
        raise NoPagesProcessed(page_errors=page_errors)

    text = PAGE_SEPARATOR.join(page.text for page in included)
    confidence = sum(page.confidence for page in included) / len(included)
    return AggregatedResult(
        text=text,
        confidence=confidence,
        pages=included,
        page_errors=page_errors,
    )
