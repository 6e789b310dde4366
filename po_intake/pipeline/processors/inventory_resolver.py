"""Resolve extracted line tuples to supplier inventory coordinates."""

from __future__ import annotations

import logging
from typing import Union

from po_intake.pipeline.config.constants import HIGH_CONFIDENCE, MAX_LINE_ITEMS
from po_intake.pipeline.core.exceptions import MappingStoreError
from po_intake.pipeline.errors.codes import LineErrorType
from po_intake.pipeline.models.dto import (
    ExtractionError,
    LineCandidate,
    LineItemCandidate,
)
from po_intake.pipeline.processors.line_extractor import (
    DEFAULT_LINE_PATTERN,
    LinePattern,
    extract_line,
    split_lines,
    unmapped,
)
from po_intake.pipeline.repositories.inventory_mapping import (
    InventoryMappingRepository,
)

logger = logging.getLogger(__name__)

NO_MAPPING_MESSAGE = "No mapping found"


async def resolve_candidate(
    candidate: LineCandidate,
    repository: InventoryMappingRepository,
) -> Union[LineItemCandidate, ExtractionError]:
    """Look up one matched line; store failures become DB_ERROR records."""
    match = candidate.match
    if match is None:
        raise ValueError("resolve_candidate requires a matched line")

    try:
        record = await repository.find(match.style.upper(), match.color, match.size.upper())
    except MappingStoreError as e:
        return _db_error(candidate, e.message)
    except Exception as e:
        return _db_error(candidate, str(e) or type(e).__name__)

    if record is None:
        return ExtractionError(
            original_text=candidate.original_text,
            error=NO_MAPPING_MESSAGE,
            type=LineErrorType.MAPPING_ERROR,
            unmapped_data=unmapped(match),
        )

    return LineItemCandidate(
        inventory_key=record.inventory_key,
        size_index=record.size_index,
        warehouse=record.warehouse,
        quantity=int(match.quantity.lstrip("0")),
        original_text=candidate.original_text,
        confidence=HIGH_CONFIDENCE,
    )


def _db_error(candidate: LineCandidate, message: str) -> ExtractionError:
    logger.warning(
        "Mapping lookup failed for line",
        extra={"error_code": LineErrorType.DB_ERROR.value, "service": "mapping_store"},
    )
    return ExtractionError(
        original_text=candidate.original_text,
        error=f"Database error: {message}",
        type=LineErrorType.DB_ERROR,
        unmapped_data=unmapped(candidate.match),
    )


async def resolve_lines(
    text: str,
    repository: InventoryMappingRepository,
    *,
    max_lines: int = MAX_LINE_ITEMS,
    pattern: LinePattern = DEFAULT_LINE_PATTERN,
) -> tuple[list[LineItemCandidate], list[ExtractionError]]:
    """Extract and resolve every line of `text`, preserving line order.

    Lines that fail the pattern never reach the repository.
    """
    line_items: list[LineItemCandidate] = []
    errors: list[ExtractionError] = []

    for line in split_lines(text, max_lines):
        extracted = extract_line(line, pattern)
        if isinstance(extracted, ExtractionError):
            errors.append(extracted)
            continue

        resolved = await resolve_candidate(extracted, repository)
        if isinstance(resolved, ExtractionError):
            errors.append(resolved)
        else:
            line_items.append(resolved)

    return line_items, errors
