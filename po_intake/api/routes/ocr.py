"""Purchase-document upload endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from po_intake.api.file_validation import read_upload
from po_intake.api.schemas import (
    ProblemDetail,
    UploadFailureResponse,
    UploadSuccessResponse,
)
from po_intake.core.dependencies import get_pipeline
from po_intake.core.utils import TRACE_HEADER, ensure_trace_id
from po_intake.pipeline.core.exceptions import FileTooLarge
from po_intake.pipeline.core.logging_config import sanitize_filename
from po_intake.pipeline.orchestrator import IntakePipeline, failure_result

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/v1/upload-invoice",
    response_model=UploadSuccessResponse,
    tags=["intake"],
    responses={
        400: {"description": "Rejected upload", "model": UploadFailureResponse},
        413: {"description": "File too large", "model": UploadFailureResponse},
        422: {"description": "No usable content", "model": UploadFailureResponse},
        500: {"description": "Processing failure", "model": UploadFailureResponse},
        503: {"description": "Pipeline unavailable", "model": ProblemDetail},
    },
)
async def upload_invoice(
    request: Request,
    invoiceFile: Optional[UploadFile] = File(None, description="PNG, JPEG or PDF"),
    pipeline: IntakePipeline = Depends(get_pipeline),
):
    trace_id = ensure_trace_id(request)

    if invoiceFile is None:
        result = failure_result("NO_FILE")
        logger.warning("Upload without file", extra={"trace_id": trace_id})
        return JSONResponse(
            status_code=result.http_status,
            content=result.to_payload(),
            headers={TRACE_HEADER: trace_id},
        )

    logger.info(
        "[NEW UPLOAD] file=%s content_type=%s",
        sanitize_filename(invoiceFile.filename or ""),
        invoiceFile.content_type,
        extra={"trace_id": trace_id},
    )

    try:
        document = await read_upload(invoiceFile, max_size=pipeline.settings.MAX_FILE_SIZE)
    except FileTooLarge as e:
        logger.warning(
            "Upload rejected before read: %s",
            e.message,
            extra={"trace_id": trace_id, "error_code": e.error_code},
        )
        result = failure_result(e.error_code, e.message)
    else:
        result = await pipeline.run(document, trace_id=trace_id)

    logger.info(
        "[RESPONSE] success=%s code=%s time=%dms",
        result.success,
        result.code,
        result.processing_time_ms,
        extra={
            "trace_id": trace_id,
            "error_code": result.code,
            "duration_ms": result.processing_time_ms,
        },
    )
    return JSONResponse(
        status_code=result.http_status,
        content=result.to_payload(),
        headers={TRACE_HEADER: trace_id},
    )
