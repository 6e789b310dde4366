"""
Centralized error code registry with specifications.

Provides single source of truth for fatal pipeline error codes, including
user-facing messages, error categories (client/server), HTTP status and
retryability flags. Non-fatal per-page and per-line record types are
enumerated separately in `PageErrorType` and `LineErrorType`.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ErrorSpec:
    """Specification for a single error type."""

    code: str
    message: str  # Default human-readable message
    category: str  # "client_error" or "server_error"
    http_status: int
    retryable: bool  # True if request can be retried


class ErrorCode(Enum):
    """Centralized error code registry.

    Usage:
        error_spec = ErrorCode.get_spec("TOO_MANY_PAGES")
        print(error_spec.message, error_spec.http_status, error_spec.retryable)
    """

    # ========================================
    # INTAKE ERRORS (not retryable)
    # ========================================
    NO_FILE = ErrorSpec(
        "NO_FILE",
        "No file uploaded",
        "client_error",
        400,
        False,
    )
    INVALID_FILE_TYPE = ErrorSpec(
        "INVALID_FILE_TYPE",
        "Invalid file type. Only PNG, JPEG, and PDF are allowed.",
        "client_error",
        400,
        False,
    )
    FILE_TOO_LARGE = ErrorSpec(
        "FILE_TOO_LARGE",
        "File exceeds maximum size limit",
        "client_error",
        413,
        False,
    )
    FILE_TOO_SMALL = ErrorSpec(
        "FILE_TOO_SMALL",
        "File is too small",
        "client_error",
        400,
        False,
    )
    INVALID_FILENAME = ErrorSpec(
        "INVALID_FILENAME",
        "Invalid filename",
        "client_error",
        400,
        False,
    )

    # ========================================
    # NORMALIZATION ERRORS
    # ========================================
    PDF_INVALID = ErrorSpec(
        "PDF_INVALID",
        "Invalid PDF file format",
        "client_error",
        400,
        False,
    )
    TOO_MANY_PAGES = ErrorSpec(
        "TOO_MANY_PAGES",
        "PDF has too many pages",
        "client_error",
        400,
        False,
    )
    PDF_CONVERSION_FAILED = ErrorSpec(
        "PDF_CONVERSION_FAILED",
        "PDF conversion failed",
        "server_error",
        500,
        True,
    )

    # ========================================
    # CONTENT ERRORS
    # ========================================
    NO_PAGES_PROCESSED = ErrorSpec(
        "NO_PAGES_PROCESSED",
        "No pages were successfully processed",
        "client_error",
        422,
        True,
    )
    NO_LINE_ITEMS = ErrorSpec(
        "NO_LINE_ITEMS",
        "No valid line items found in the text",
        "client_error",
        422,
        False,
    )

    # ========================================
    # FALLBACK
    # ========================================
    UNKNOWN_ERROR = ErrorSpec(
        "UNKNOWN_ERROR",
        "Unknown error",
        "server_error",
        500,
        False,
    )

    @classmethod
    def get_spec(cls, code: str) -> ErrorSpec:
        """Get error specification by code string.

        Returns:
            ErrorSpec with category, message, and retryability.
            Returns default spec for unknown codes.
        """
        for error in cls:
            if error.value.code == code:
                return error.value
        return ErrorSpec(code, f"Error: {code}", "server_error", 500, False)


class PageErrorType(str, Enum):
    """Non-fatal page-level record types."""

    EMPTY_PAGE = "EMPTY_PAGE"
    LOW_CONFIDENCE = "LOW_CONFIDENCE"
    PAGE_PROCESSING_ERROR = "PAGE_PROCESSING_ERROR"


class LineErrorType(str, Enum):
    """Non-fatal line-level record types."""

    FORMAT_ERROR = "FORMAT_ERROR"
    MAPPING_ERROR = "MAPPING_ERROR"
    DB_ERROR = "DB_ERROR"
    PARSING_ERROR = "PARSING_ERROR"
