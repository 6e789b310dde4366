from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from po_intake.core.settings import PipelineSettings
from po_intake.pipeline.clients.base import TextDetector
from po_intake.pipeline.core.exceptions import (
    NoLineItems,
    NoPagesProcessed,
    PipelineError,
)
from po_intake.pipeline.core.logging_config import sanitize_filename
from po_intake.pipeline.errors.codes import ErrorCode
from po_intake.pipeline.models.dto import (
    AggregatedResult,
    ExtractionError,
    LineItemCandidate,
    PageImage,
    PageProcessingError,
    PipelineResult,
    UploadedDocument,
    ValidatedDocument,
)
from po_intake.pipeline.processors.aggregator import aggregate_pages
from po_intake.pipeline.processors.format_normalizer import normalize_document
from po_intake.pipeline.processors.intake_validator import validate_upload
from po_intake.pipeline.processors.inventory_resolver import resolve_lines
from po_intake.pipeline.processors.metadata_extractor import extract_document_metadata
from po_intake.pipeline.processors.ocr_executor import run_ocr_on_pages
from po_intake.pipeline.processors.resource_reaper import ResourceReaper
from po_intake.pipeline.repositories.inventory_mapping import (
    InventoryMappingRepository,
)
from po_intake.pipeline.utils.timing import StageTimers

logger = logging.getLogger(__name__)


def _generate_run_id() -> str:
    return str(uuid.uuid4())


@dataclass
class PipelineContext:
    document: UploadedDocument
    run_id: str
    trace_id: Optional[str] = None

    # populated during run
    reaper: Optional[ResourceReaper] = None
    validated: Optional[ValidatedDocument] = None
    pages: list[PageImage] = field(default_factory=list)
    aggregated: Optional[AggregatedResult] = None
    page_errors: list[PageProcessingError] = field(default_factory=list)
    line_items: list[LineItemCandidate] = field(default_factory=list)
    parsing_errors: list[ExtractionError] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)
    timers: StageTimers = field(default_factory=StageTimers)

    @property
    def log_extra(self) -> dict:
        return {"trace_id": self.trace_id, "run_id": self.run_id}


class IntakePipeline:
    """Sequences validation, normalization, OCR, aggregation and extraction.

    One `run()` call handles one uploaded document. Fatal stage failures
    short-circuit to a failure result; the request workspace is reaped on
    every exit path.
    """

    def __init__(
        self,
        detector: TextDetector,
        repository: InventoryMappingRepository,
        settings: Optional[PipelineSettings] = None,
    ) -> None:
        self.detector = detector
        self.repository = repository
        self.settings = settings or PipelineSettings()

    def _stage_validate(self, ctx: PipelineContext) -> None:
        with ctx.timers.timer("validate"):
            ctx.validated = validate_upload(
                ctx.document,
                min_size=self.settings.MIN_FILE_SIZE,
                max_size=self.settings.MAX_FILE_SIZE,
            )

    async def _stage_normalize(self, ctx: PipelineContext) -> None:
        ctx.reaper = ResourceReaper.create(self.settings.WORK_DIR)
        with ctx.timers.timer("normalize"):
            ctx.pages = await asyncio.to_thread(
                normalize_document,
                ctx.validated,
                ctx.reaper,
                max_pages=self.settings.MAX_PDF_PAGES,
                dpi=self.settings.PDF_RENDER_DPI,
            )
        logger.info(
            "Document normalized",
            extra={**ctx.log_extra, "page_count": len(ctx.pages)},
        )

    async def _stage_ocr(self, ctx: PipelineContext) -> None:
        with ctx.timers.timer("ocr"):
            outcomes = await run_ocr_on_pages(
                self.detector,
                ctx.pages,
                timeout_seconds=self.settings.OCR_TIMEOUT_SECONDS,
                concurrency=self.settings.OCR_CONCURRENCY,
            )
        try:
            ctx.aggregated = aggregate_pages(
                outcomes, min_confidence=self.settings.MIN_OCR_CONFIDENCE
            )
        except NoPagesProcessed as e:
            ctx.page_errors = e.page_errors
            raise
        ctx.page_errors = ctx.aggregated.page_errors

    async def _stage_extract(self, ctx: PipelineContext) -> None:
        text = ctx.aggregated.text
        with ctx.timers.timer("extract"):
            ctx.line_items, ctx.parsing_errors = await resolve_lines(
                text, self.repository, max_lines=self.settings.MAX_LINE_ITEMS
            )
            ctx.metadata = extract_document_metadata(text)

        if not ctx.line_items and not ctx.parsing_errors:
            raise NoLineItems()

    def _reap(self, ctx: PipelineContext) -> list[str]:
        if ctx.reaper is None:
            return []
        return ctx.reaper.reap()

    def _build_failure(
        self, ctx: PipelineContext, error: PipelineError, cleanup_errors: list[str]
    ) -> PipelineResult:
        return PipelineResult(
            success=False,
            error=error.message,
            code=error.error_code,
            http_status=error.http_status,
            processing_errors=list(ctx.page_errors),
            cleanup_errors=cleanup_errors,
            processing_time_ms=ctx.timers.elapsed_ms(),
        )

    def _build_success(
        self, ctx: PipelineContext, cleanup_errors: list[str]
    ) -> PipelineResult:
        aggregated = ctx.aggregated
        return PipelineResult(
            success=True,
            line_items=ctx.line_items,
            parsing_errors=ctx.parsing_errors,
            processing_errors=list(ctx.page_errors),
            cleanup_errors=cleanup_errors,
            pages=list(aggregated.pages),
            total_pages=len(ctx.pages),
            confidence=aggregated.confidence,
            processing_time_ms=ctx.timers.elapsed_ms(),
            raw_text=aggregated.text,
            metadata=ctx.metadata,
        )

    async def run(
        self, document: UploadedDocument, trace_id: Optional[str] = None
    ) -> PipelineResult:
        """Execute the pipeline end-to-end and return the result."""
        ctx = PipelineContext(
            document=document, run_id=_generate_run_id(), trace_id=trace_id
        )
        logger.info(
            "Pipeline started for %s (%d bytes)",
            sanitize_filename(document.filename),
            len(document.content),
            extra=ctx.log_extra,
        )

        failure: Optional[PipelineError] = None
        try:
            self._stage_validate(ctx)
            await self._stage_normalize(ctx)
            await self._stage_ocr(ctx)
            await self._stage_extract(ctx)
        except PipelineError as pe:
            logger.error(
                f"Pipeline stage failed: {pe.error_code} - {pe.message}",
                extra={**ctx.log_extra, "error_code": pe.error_code},
            )
            failure = pe
        except Exception as exc:
            logger.error(
                f"Unexpected pipeline error: {exc}",
                exc_info=True,
                extra={**ctx.log_extra, "error_code": "UNKNOWN_ERROR"},
            )
            failure = PipelineError(details={"detail": str(exc)})
        finally:
            cleanup_errors = self._reap(ctx)

        if failure is not None:
            return self._build_failure(ctx, failure, cleanup_errors)

        result = self._build_success(ctx, cleanup_errors)
        logger.info(
            "Pipeline finished: %d item(s), %d error(s), stages=%s",
            len(result.line_items),
            len(result.parsing_errors),
            ctx.timers.as_ms(),
            extra={**ctx.log_extra, "duration_ms": result.processing_time_ms},
        )
        return result


def failure_result(code: str, message: Optional[str] = None) -> PipelineResult:
    """Failure result for errors raised outside the pipeline (e.g. missing file)."""
    spec = ErrorCode.get_spec(code)
    return PipelineResult(
        success=False,
        error=message or spec.message,
        code=spec.code,
        http_status=spec.http_status,
    )
