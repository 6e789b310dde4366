"""Unit tests for line splitting and pattern matching."""

import pytest

from po_intake.pipeline.errors.codes import LineErrorType
from po_intake.pipeline.models.dto import ExtractionError, LineCandidate, LineMatch
from po_intake.pipeline.processors.line_extractor import (
    LinePattern,
    extract_line,
    split_lines,
)


class TestSplitLines:
    def test_trims_and_drops_blank_lines(self):
        assert split_lines("  a \n\n\t\nb\n   ") == ["a", "b"]

    def test_caps_line_count(self):
        text = "\n".join(f"line {i}" for i in range(150))
        lines = split_lines(text, max_lines=100)
        assert len(lines) == 100
        assert lines[-1] == "line 99"

    def test_empty_text(self):
        assert split_lines("") == []


class TestLinePattern:
    def test_named_outputs(self):
        match = LinePattern().search("PC61 Black L 12")
        assert match == LineMatch(style="PC61", color="Black", size="L", quantity="12")

    def test_matches_anywhere_in_line(self):
        match = LinePattern().search("Item: PC61 Navy XL 3 @ $4.00")
        assert match is not None
        assert match.style == "PC61"
        assert match.quantity == "3"

    def test_case_insensitive_size(self):
        match = LinePattern().search("pc61 black xl 2")
        assert match.size == "xl"

    def test_no_match(self):
        assert LinePattern().search("thank you for your order") is None


class TestExtractLine:
    def test_well_formed_line(self):
        result = extract_line("PC61 Black L 12")
        assert isinstance(result, LineCandidate)
        assert result.original_text == "PC61 Black L 12"
        assert result.match.quantity == "12"

    def test_non_matching_line_is_format_error(self):
        result = extract_line("thank you for your order")
        assert isinstance(result, ExtractionError)
        assert result.type == LineErrorType.FORMAT_ERROR
        assert result.error == "Line format does not match expected pattern"
        assert result.unmapped_data is None

    @pytest.mark.parametrize(
        "line",
        [
            "ABCDEFGHIJKLMNOPQRSTU Black L 1",
            "PC61 ABCDEFGHIJKLMNOPQRSTU L 1",
            "PC61 Black ABCDEFGHIJK 1",
        ],
    )
    def test_field_too_long(self, line):
        result = extract_line(line)
        assert result.type == LineErrorType.PARSING_ERROR
        assert result.error == "Field length exceeds maximum"
        assert result.unmapped_data is not None

    @pytest.mark.parametrize("quantity", ["0", "10001", "99999"])
    def test_quantity_out_of_range(self, quantity):
        result = extract_line(f"PC61 Black L {quantity}")
        assert result.type == LineErrorType.PARSING_ERROR
        assert result.error == "Invalid quantity"
        assert result.unmapped_data.quantity == quantity

    @pytest.mark.parametrize("quantity", ["1", "10000"])
    def test_quantity_bounds_inclusive(self, quantity):
        assert isinstance(extract_line(f"PC61 Black L {quantity}"), LineCandidate)

    def test_oversized_quantity_is_parsing_error(self):
        """A quantity token past int()'s digit limit is classified, not raised."""
        line = "PC61 Black L " + "9" * 5000
        result = extract_line(line)
        assert isinstance(result, ExtractionError)
        assert result.type == LineErrorType.PARSING_ERROR
        assert result.error == "Invalid quantity"
        assert len(result.unmapped_data.quantity) == 5000

    def test_leading_zeros_do_not_count_toward_length(self):
        result = extract_line("PC61 Black L " + "0" * 5000 + "12")
        assert isinstance(result, LineCandidate)
