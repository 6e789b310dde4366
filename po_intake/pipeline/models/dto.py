"""
Lightweight DTO models used as typed contracts across the pipeline.

Internal stage hand-offs are frozen dataclasses; records that end up in the
response payload are pydantic models with camelCase aliases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from po_intake.pipeline.config.constants import DEFAULT_WAREHOUSE
from po_intake.pipeline.errors.codes import LineErrorType, PageErrorType

FileKind = Literal["png", "jpeg", "pdf"]


# ---------------------------------------------------------------------------
# Stage hand-offs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UploadedDocument:
    """Raw upload as received at the HTTP boundary."""

    content: bytes
    content_type: str
    filename: str
    size_bytes: int

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()


@dataclass(frozen=True)
class ValidatedDocument:
    document: UploadedDocument
    file_type: FileKind


@dataclass(frozen=True)
class PageImage:
    """One rasterized page; `index` is 1-based."""

    index: int
    image_path: Path
    source: str


@dataclass(frozen=True)
class OCRPageResult:
    page_index: int
    text: str
    confidence: float


class LineMatch(NamedTuple):
    """Raw fields captured from one order line."""

    style: str
    color: str
    size: str
    quantity: str


@dataclass(frozen=True)
class LineCandidate:
    original_text: str
    match: Optional[LineMatch] = None


@dataclass(frozen=True)
class InventoryMappingRecord:
    """Vendor (style, color, size) -> supplier inventory coordinates."""

    style_code: str
    color: str
    size: str
    inventory_key: str
    size_index: str
    warehouse: str = DEFAULT_WAREHOUSE
    description: Optional[str] = None
    active: bool = True


# ---------------------------------------------------------------------------
# Payload records
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class LineItemCandidate(_CamelModel):
    """Resolved, submittable order line."""

    inventory_key: str = Field(alias="inventoryKey")
    size_index: str = Field(alias="sizeIndex")
    warehouse: str
    quantity: int
    original_text: str = Field(alias="originalText")
    confidence: Literal["high"] = "high"


class UnmappedData(_CamelModel):
    style: str
    color: str
    size: str
    quantity: str


class ExtractionError(_CamelModel):
    """Classified non-fatal failure for one line."""

    original_text: str = Field(alias="originalText")
    error: str
    type: LineErrorType
    unmapped_data: Optional[UnmappedData] = Field(default=None, alias="unmappedData")


class PageProcessingError(_CamelModel):
    """Classified non-fatal failure or quality warning for one page."""

    page_number: int = Field(alias="pageNumber")
    type: PageErrorType
    message: str
    confidence: Optional[float] = None


PageOutcome = Union[OCRPageResult, PageProcessingError]


def outcome_page_number(outcome: PageOutcome) -> int:
    if isinstance(outcome, OCRPageResult):
        return outcome.page_index
    return outcome.page_number


@dataclass(frozen=True)
class AggregatedResult:
    text: str
    confidence: float
    pages: list[OCRPageResult]
    page_errors: list[PageProcessingError]


@dataclass
class PipelineResult:
    """Outcome of one pipeline run, success or failure.

    `to_payload()` renders the camelCase response body.
    """

    success: bool
    line_items: list[LineItemCandidate] = field(default_factory=list)
    parsing_errors: list[ExtractionError] = field(default_factory=list)
    processing_errors: list[PageProcessingError] = field(default_factory=list)
    cleanup_errors: list[str] = field(default_factory=list)
    pages: list[OCRPageResult] = field(default_factory=list)
    total_pages: int = 0
    confidence: float = 0.0
    processing_time_ms: int = 0
    raw_text: str = ""
    metadata: dict = field(default_factory=dict)
    error: Optional[str] = None
    code: Optional[str] = None
    http_status: int = 200

    def to_payload(self) -> dict:
        if not self.success:
            payload: dict = {"success": False, "error": self.error, "code": self.code}
            if self.processing_errors:
                payload["processingErrors"] = _dump(self.processing_errors)
            if self.cleanup_errors:
                payload["cleanupErrors"] = list(self.cleanup_errors)
            return payload

        payload = {
            "success": True,
            "lineItems": _dump(self.line_items),
            "parsingErrors": _dump(self.parsing_errors),
        }
        if self.processing_errors:
            payload["processingErrors"] = _dump(self.processing_errors)
        if self.cleanup_errors:
            payload["cleanupErrors"] = list(self.cleanup_errors)
        payload["stats"] = {
            "totalItems": len(self.line_items),
            "errorCount": len(self.parsing_errors),
            "confidence": self.confidence,
            "processingTimeMs": self.processing_time_ms,
            "totalPages": self.total_pages,
            "processedPages": [page.page_index for page in self.pages],
        }
        payload["pageDetails"] = [
            {
                "pageNumber": page.page_index,
                "confidence": page.confidence,
                "textLength": len(page.text),
            }
            for page in self.pages
        ]
        payload["metadata"] = dict(self.metadata)
        payload["rawText"] = self.raw_text
        return payload


def _dump(models: list[BaseModel]) -> list[dict]:
    return [m.model_dump(mode="json", by_alias=True, exclude_none=True) for m in models]
