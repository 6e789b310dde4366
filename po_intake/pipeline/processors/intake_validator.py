"""Upload validation performed before any expensive work.

Checks run in a fixed order (type, size, filename) and the first failure
raises; nothing is written to disk here.
"""

import logging
import re

from po_intake.pipeline.config.constants import (
    ALLOWED_CONTENT_TYPES,
    ALLOWED_EXTENSIONS,
    FILENAME_ALLOWED_PATTERN,
    FILENAME_MAX_LENGTH,
    MAX_FILE_SIZE,
    MIN_FILE_SIZE,
)
from po_intake.pipeline.core.exceptions import (
    FileTooLarge,
    FileTooSmall,
    InvalidFilename,
    InvalidFileType,
)
from po_intake.pipeline.core.logging_config import sanitize_filename
from po_intake.pipeline.models.dto import UploadedDocument, ValidatedDocument
from po_intake.pipeline.utils.file_detection import (
    detect_file_type_from_bytes,
    file_type_from_mime,
)

logger = logging.getLogger(__name__)

_FILENAME_RE = re.compile(FILENAME_ALLOWED_PATTERN)


def _validate_type(document: UploadedDocument) -> None:
    content_type = (document.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidFileType(
            details={
                "content_type": document.content_type,
                "allowed_types": sorted(ALLOWED_CONTENT_TYPES),
            }
        )
    if document.extension not in ALLOWED_EXTENSIONS:
        raise InvalidFileType(
            details={
                "extension": document.extension,
                "allowed_extensions": sorted(ALLOWED_EXTENSIONS),
            }
        )


def format_size(size_bytes: int) -> str:
    """Human-readable limit: bytes below 1KB, then KB, then MB."""
    if size_bytes < 1024:
        return f"{size_bytes} bytes"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:g}KB"
    return f"{size_bytes / (1024 * 1024):g}MB"


def file_too_large(size: int, max_size: int) -> FileTooLarge:
    return FileTooLarge(
        message=f"File too large. Maximum size is {format_size(max_size)}",
        details={"size_bytes": size, "max_size": max_size},
    )


def _validate_size(document: UploadedDocument, min_size: int, max_size: int) -> int:
    size = len(document.content)
    if document.size_bytes != size:
        logger.warning(
            "Declared size %d differs from payload length %d",
            document.size_bytes,
            size,
        )
    if size < min_size:
        raise FileTooSmall(
            message=f"File is too small. Minimum size is {format_size(min_size)}",
            details={"size_bytes": size, "min_size": min_size},
        )
    if size > max_size:
        raise file_too_large(size, max_size)
    return size


def _validate_filename(filename: str) -> None:
    if (
        not filename
        or len(filename) > FILENAME_MAX_LENGTH
        or not _FILENAME_RE.match(filename)
    ):
        raise InvalidFilename(details={"filename": sanitize_filename(filename or "")})


def validate_upload(
    document: UploadedDocument,
    *,
    min_size: int = MIN_FILE_SIZE,
    max_size: int = MAX_FILE_SIZE,
) -> ValidatedDocument:
    """Validate raw upload bytes and declared metadata.

    Raises:
        InvalidFileType: MIME type or extension not allowed
        FileTooSmall / FileTooLarge: payload outside size limits
        InvalidFilename: empty, too long, or disallowed characters
    """
    _validate_type(document)
    size = _validate_size(document, min_size, max_size)
    _validate_filename(document.filename)

    declared_type = file_type_from_mime(document.content_type)
    detected_type = detect_file_type_from_bytes(document.content[:8])
    if detected_type is not None and detected_type != declared_type:
        logger.warning(
            "Content-Type mismatch: header=%s detected=%s",
            document.content_type,
            detected_type,
        )

    # declared PDFs are re-checked by the normalizer, images are taken by sniffed type
    file_type = declared_type
    if declared_type != "pdf" and detected_type in ("png", "jpeg"):
        file_type = detected_type

    logger.info(
        "File validated: type=%s size=%d content_type=%s",
        file_type,
        size,
        document.content_type,
    )
    return ValidatedDocument(document=document, file_type=file_type)
