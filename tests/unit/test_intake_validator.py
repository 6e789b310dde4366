"""Unit tests for upload validation."""

import pytest

from po_intake.pipeline.core.exceptions import (
    FileTooLarge,
    FileTooSmall,
    InvalidFilename,
    InvalidFileType,
)
from po_intake.pipeline.processors.intake_validator import format_size, validate_upload
from tests.fakes import jpeg_bytes, make_document, pdf_bytes, png_bytes


class TestAcceptedUploads:
    """Valid documents pass and carry their detected type."""

    def test_png_accepted(self):
        validated = validate_upload(make_document(png_bytes()))
        assert validated.file_type == "png"

    def test_jpeg_with_jpg_mime_accepted(self):
        doc = make_document(jpeg_bytes(), filename="scan.jpg", content_type="image/jpg")
        assert validate_upload(doc).file_type == "jpeg"

    def test_pdf_accepted(self):
        doc = make_document(pdf_bytes(), filename="order.pdf", content_type="application/pdf")
        assert validate_upload(doc).file_type == "pdf"

    def test_uppercase_extension_accepted(self):
        doc = make_document(png_bytes(), filename="ORDER.PNG")
        assert validate_upload(doc).file_type == "png"

    def test_mismatched_magic_bytes_only_warns(self, caplog):
        """A PNG declared as JPEG is accepted and treated by its real type."""
        doc = make_document(png_bytes(), filename="scan.jpg", content_type="image/jpeg")
        validated = validate_upload(doc)
        assert validated.file_type == "png"
        assert "Content-Type mismatch" in caplog.text


class TestRejectedUploads:
    """Each rule raises its own error code."""

    def test_unsupported_mime_type(self):
        doc = make_document(png_bytes(), filename="order.gif", content_type="image/gif")
        with pytest.raises(InvalidFileType) as exc_info:
            validate_upload(doc)
        assert exc_info.value.error_code == "INVALID_FILE_TYPE"
        assert exc_info.value.http_status == 400

    def test_unsupported_extension(self):
        doc = make_document(png_bytes(), filename="order.tiff")
        with pytest.raises(InvalidFileType):
            validate_upload(doc)

    def test_file_too_small(self):
        """A 500-byte file is rejected before any other stage."""
        doc = make_document(b"\x89PNG" + b"\x00" * 496)
        with pytest.raises(FileTooSmall) as exc_info:
            validate_upload(doc)
        assert exc_info.value.error_code == "FILE_TOO_SMALL"

    def test_small_minimum_reported_in_bytes(self):
        """Sub-kilobyte minimums are not rounded down to 0KB."""
        doc = make_document(b"\x89PNG" + b"\x00" * 296)
        with pytest.raises(FileTooSmall) as exc_info:
            validate_upload(doc, min_size=512)
        assert exc_info.value.message == "File is too small. Minimum size is 512 bytes"

    def test_default_limits_in_messages(self):
        with pytest.raises(FileTooSmall) as exc_info:
            validate_upload(make_document(b"\x89PNG" + b"\x00" * 496))
        assert exc_info.value.message == "File is too small. Minimum size is 1KB"

    def test_file_too_large(self):
        doc = make_document(png_bytes())
        with pytest.raises(FileTooLarge) as exc_info:
            validate_upload(doc, max_size=2048)
        assert exc_info.value.http_status == 413

    def test_actual_length_wins_over_declared_size(self):
        """Declared size says 5KB, payload is 10 bytes: payload length decides."""
        doc = make_document(b"\x89PNG" + b"\x00" * 6)
        doc = type(doc)(doc.content, doc.content_type, doc.filename, 5 * 1024)
        with pytest.raises(FileTooSmall):
            validate_upload(doc)

    @pytest.mark.parametrize(
        "filename",
        ["", "my order.png", "order$.png", "../etc/passwd.png", "a" * 252 + ".png"],
    )
    def test_invalid_filenames(self, filename):
        doc = make_document(png_bytes(), filename=filename)
        with pytest.raises((InvalidFilename, InvalidFileType)):
            validate_upload(doc)

    def test_bad_characters_give_invalid_filename(self):
        doc = make_document(png_bytes(), filename="order#1.png")
        with pytest.raises(InvalidFilename):
            validate_upload(doc)


class TestCheckOrder:
    """Type is checked before size, size before filename."""

    def test_type_before_size(self):
        doc = make_document(b"tiny", filename="x.gif", content_type="image/gif")
        with pytest.raises(InvalidFileType):
            validate_upload(doc)

    def test_size_before_filename(self):
        doc = make_document(b"tiny", filename="bad name.png")
        with pytest.raises(FileTooSmall):
            validate_upload(doc)


class TestFormatSize:
    @pytest.mark.parametrize(
        "size_bytes,expected",
        [
            (500, "500 bytes"),
            (1024, "1KB"),
            (1536, "1.5KB"),
            (10 * 1024 * 1024, "10MB"),
        ],
    )
    def test_units(self, size_bytes, expected):
        assert format_size(size_bytes) == expected
