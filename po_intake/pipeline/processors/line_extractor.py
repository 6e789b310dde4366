"""
Split OCR text into candidate order lines and pattern-match each one.

A line is `<style> <color> <size> <quantity>` anywhere in the text, e.g.
"PC61 Black L 12". Field limits are enforced here so the resolver only
ever sees well-formed tuples.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from po_intake.pipeline.config.constants import (
    COLOR_MAX_LENGTH,
    MAX_LINE_ITEMS,
    QUANTITY_MAX,
    QUANTITY_MIN,
    SIZE_MAX_LENGTH,
    STYLE_MAX_LENGTH,
)
from po_intake.pipeline.errors.codes import LineErrorType
from po_intake.pipeline.models.dto import (
    ExtractionError,
    LineCandidate,
    LineMatch,
    UnmappedData,
)

FORMAT_ERROR_MESSAGE = "Line format does not match expected pattern"
FIELD_LENGTH_MESSAGE = "Field length exceeds maximum"
INVALID_QUANTITY_MESSAGE = "Invalid quantity"


class LinePattern:
    """Compiled order-line pattern exposing its named groups as a LineMatch."""

    PATTERN = (
        r"(?P<style>\w+)\s+(?P<color>\w+)\s+(?P<size>[A-Z0-9]+)\s+(?P<quantity>\d+)"
    )

    def __init__(self, pattern: str = PATTERN, flags: int = re.IGNORECASE):
        self._regex = re.compile(pattern, flags)

    def search(self, line: str) -> Optional[LineMatch]:
        m = self._regex.search(line)
        if m is None:
            return None
        return LineMatch(
            style=m.group("style"),
            color=m.group("color"),
            size=m.group("size"),
            quantity=m.group("quantity"),
        )


DEFAULT_LINE_PATTERN = LinePattern()


def split_lines(text: str, max_lines: int = MAX_LINE_ITEMS) -> list[str]:
    """Trimmed, non-blank lines, capped at `max_lines`."""
    lines = [line.strip() for line in (text or "").split("\n")]
    return [line for line in lines if line][:max_lines]


def unmapped(match: LineMatch) -> UnmappedData:
    return UnmappedData(
        style=match.style,
        color=match.color,
        size=match.size,
        quantity=match.quantity,
    )


def extract_line(
    line: str,
    pattern: LinePattern = DEFAULT_LINE_PATTERN,
) -> Union[LineCandidate, ExtractionError]:
    """Match one trimmed line; returns a candidate or a classified error."""
    match = pattern.search(line)
    if match is None:
        return ExtractionError(
            original_text=line,
            error=FORMAT_ERROR_MESSAGE,
            type=LineErrorType.FORMAT_ERROR,
        )

    if (
        len(match.style) > STYLE_MAX_LENGTH
        or len(match.color) > COLOR_MAX_LENGTH
        or len(match.size) > SIZE_MAX_LENGTH
    ):
        return ExtractionError(
            original_text=line,
            error=FIELD_LENGTH_MESSAGE,
            type=LineErrorType.PARSING_ERROR,
            unmapped_data=unmapped(match),
        )

    digits = match.quantity.lstrip("0")
    # bound the token before int() so oversized runs stay a line-level error
    if len(digits) > len(str(QUANTITY_MAX)) or not (
        QUANTITY_MIN <= int(digits or "0") <= QUANTITY_MAX
    ):
        return ExtractionError(
            original_text=line,
            error=INVALID_QUANTITY_MESSAGE,
            type=LineErrorType.PARSING_ERROR,
            unmapped_data=unmapped(match),
        )

    return LineCandidate(original_text=line, match=match)
