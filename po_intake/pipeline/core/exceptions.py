"""Custom exception hierarchy for the intake pipeline.

All exceptions inherit from BaseError and provide structured error information
compatible with RFC 7807 Problem Details for HTTP APIs. Fatal pipeline
failures derive from PipelineError and take their code, message and HTTP
status from the ErrorCode registry.
"""

from enum import Enum
from typing import Any, Optional

from po_intake.pipeline.errors.codes import ErrorCode


class ErrorCategory(str, Enum):
    """Error categories for classification and monitoring."""

    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    EXTERNAL_SERVICE = "external_service"


class BaseError(Exception):
    """Base exception for all intake service errors.

    Attributes:
        message: Human-readable error message
        error_code: Application-specific error code
        category: Error category for classification
        http_status: HTTP status code to return
        details: Additional context (dict)
        retryable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        http_status: int,
        details: Optional[dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.http_status = http_status
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to RFC 7807 Problem Details format."""
        return {
            "type": f"/errors/{self.error_code}",
            "title": self.message,
            "status": self.http_status,
            "code": self.error_code,
            "detail": self.details.get("detail"),
            "category": self.category.value,
            "retryable": self.retryable,
        }


class PipelineError(BaseError):
    """Fatal pipeline failure that aborts the whole request.

    Subclasses set `code`; message, category and HTTP status come from the
    ErrorCode registry unless overridden.
    """

    code: str = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        spec = ErrorCode.get_spec(self.code)
        super().__init__(
            message=message or spec.message,
            error_code=spec.code,
            category=ErrorCategory(spec.category),
            http_status=spec.http_status,
            details=details,
            retryable=spec.retryable,
        )


class InvalidFileType(PipelineError):
    code = "INVALID_FILE_TYPE"


class FileTooLarge(PipelineError):
    code = "FILE_TOO_LARGE"


class FileTooSmall(PipelineError):
    code = "FILE_TOO_SMALL"


class InvalidFilename(PipelineError):
    code = "INVALID_FILENAME"


class PdfInvalid(PipelineError):
    code = "PDF_INVALID"


class PdfConversionFailed(PipelineError):
    code = "PDF_CONVERSION_FAILED"


class TooManyPages(PipelineError):
    code = "TOO_MANY_PAGES"

    def __init__(self, page_count: int, max_pages: int):
        super().__init__(
            message=f"PDF has too many pages. Maximum allowed is {max_pages}",
            details={"page_count": page_count, "max_pages": max_pages},
        )
        self.page_count = page_count
        self.max_pages = max_pages


class NoPagesProcessed(PipelineError):
    """Raised when no page produced usable OCR text.

    Carries the per-page records so they can be reported with the failure.
    """

    code = "NO_PAGES_PROCESSED"

    def __init__(self, page_errors: Optional[list] = None):
        super().__init__()
        self.page_errors = list(page_errors or [])


class NoLineItems(PipelineError):
    code = "NO_LINE_ITEMS"


class ExternalServiceError(BaseError):
    """External service failure (502 Bad Gateway / 504 Gateway Timeout).

    Raised when external services (OCR, mapping store) fail or timeout.

    Args:
        service_name: Name of the external service
        error_type: Type of error ("timeout", "unavailable", "error")
        details: Additional error context
    """

    def __init__(self, service_name: str, error_type: str, **kwargs):
        http_status = 504 if error_type == "timeout" else 502

        additional_details = kwargs.pop("details", {})
        additional_details.update(
            {
                "service": service_name,
                "error_type": error_type,
            }
        )

        super().__init__(
            message=kwargs.pop("message", f"{service_name} service {error_type}"),
            error_code=f"{service_name.upper()}_{error_type.upper()}",
            category=ErrorCategory.EXTERNAL_SERVICE,
            http_status=http_status,
            retryable=True,
            details=additional_details,
        )


class MappingStoreError(ExternalServiceError):
    """Inventory-mapping store lookup failed (unavailable, query error)."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            service_name="mapping_store",
            error_type="unavailable",
            message=message,
            **kwargs,
        )
