"""Pydantic response schemas for API endpoints."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from po_intake.pipeline.models.dto import (
    ExtractionError,
    LineItemCandidate,
    PageProcessingError,
)


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Used for request-level failures (validation, routing, unexpected errors).
    Pipeline outcomes use the upload payload below instead.

    See: https://www.rfc-editor.org/rfc/rfc7807
    """

    type: str = Field(..., description="URI reference identifying the problem type")
    title: str = Field(..., description="Short, human-readable summary of the problem")
    status: int = Field(..., description="HTTP status code for this problem")
    detail: Optional[str] = Field(
        None, description="Human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        None, description="URI reference identifying this specific occurrence"
    )

    # Extension members (allowed by RFC 7807)
    code: str = Field(..., description="Application-specific error code")
    category: str = Field(
        ..., description="Error category (client_error, server_error, etc.)"
    )
    retryable: bool = Field(
        default=False, description="Whether the request can be retried"
    )
    trace_id: Optional[str] = Field(
        None, description="Distributed tracing ID for correlation across services"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "/errors/VALIDATION_ERROR",
                "title": "Request validation failed",
                "status": 422,
                "detail": "invoiceFile: Expected UploadFile",
                "instance": "/v1/upload-invoice",
                "code": "VALIDATION_ERROR",
                "category": "client_error",
                "retryable": False,
                "trace_id": "a1b2c3d4-e5f6-7890-abcd-ef1234567890",
            }
        }
    )


class UploadStats(BaseModel):
    totalItems: int
    errorCount: int
    confidence: float
    processingTimeMs: int
    totalPages: int
    processedPages: list[int]


class PageDetail(BaseModel):
    pageNumber: int
    confidence: float
    textLength: int


class UploadSuccessResponse(BaseModel):
    """Body of a successful `/v1/upload-invoice` call."""

    success: bool = True
    lineItems: List[LineItemCandidate]
    parsingErrors: List[ExtractionError]
    processingErrors: Optional[List[PageProcessingError]] = None
    cleanupErrors: Optional[List[str]] = None
    stats: UploadStats
    pageDetails: List[PageDetail]
    metadata: dict[str, Any] = Field(default_factory=dict)
    rawText: str


class UploadFailureResponse(BaseModel):
    """Body returned when the pipeline aborts."""

    success: bool = False
    error: str
    code: str
    processingErrors: Optional[List[PageProcessingError]] = None
    cleanupErrors: Optional[List[str]] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": "PDF has too many pages. Maximum allowed is 10",
                "code": "TOO_MANY_PAGES",
            }
        }
    )


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    ocr_backend: Optional[str] = None
    mapping_store: dict[str, Any]
