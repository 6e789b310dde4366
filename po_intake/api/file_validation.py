"""Upload intake at the HTTP boundary.

Reads the multipart file into an UploadedDocument; content rules live in
the pipeline's intake validator so they apply to every caller. Only the
size ceiling is enforced here, before the body is read into memory.
"""

import logging
import os
from typing import Optional

from fastapi import UploadFile

from po_intake.pipeline.models.dto import UploadedDocument
from po_intake.pipeline.processors.intake_validator import file_too_large

logger = logging.getLogger(__name__)


def _get_file_size(file: UploadFile) -> int:
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


async def read_upload(file: UploadFile, max_size: Optional[int] = None) -> UploadedDocument:
    """Read the full upload into memory with its declared metadata.

    Raises:
        FileTooLarge: spooled size exceeds `max_size`; nothing is read
    """
    declared_size = _get_file_size(file)
    if max_size is not None and declared_size > max_size:
        await file.close()
        raise file_too_large(declared_size, max_size)

    content = await file.read()
    await file.close()

    logger.debug(
        "Upload received: declared=%d read=%d content_type=%s",
        declared_size,
        len(content),
        file.content_type,
    )
    return UploadedDocument(
        content=content,
        content_type=file.content_type or "",
        filename=file.filename or "",
        size_bytes=declared_size,
    )
