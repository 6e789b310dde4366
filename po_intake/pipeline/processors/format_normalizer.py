"""
Turn a validated upload into an ordered list of page images.

Images pass through as a single page. PDFs are page-counted with pypdf
first, so oversized documents are rejected before anything is rendered,
then rasterized page by page with pypdfium2.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pypdf
import pypdfium2 as pdfium

from po_intake.pipeline.config.constants import (
    INPUT_FILE,
    MAX_PDF_PAGES,
    PAGE_IMAGE_NAME,
    PDF_HEADER,
    PDF_RENDER_DPI,
)
from po_intake.pipeline.core.exceptions import (
    PdfConversionFailed,
    PdfInvalid,
    TooManyPages,
)
from po_intake.pipeline.models.dto import PageImage, ValidatedDocument
from po_intake.pipeline.processors.resource_reaper import ResourceReaper

logger = logging.getLogger(__name__)

_EXTENSION_BY_TYPE = {"pdf": ".pdf", "png": ".png", "jpeg": ".jpg"}


def materialize_upload(validated: ValidatedDocument, reaper: ResourceReaper) -> Path:
    """Write the upload bytes into the request workspace."""
    ext = _EXTENSION_BY_TYPE[validated.file_type]
    path = reaper.track(reaper.workspace / INPUT_FILE.format(ext=ext))
    path.write_bytes(validated.document.content)
    return path


def count_pdf_pages(pdf_path: Path) -> int:
    """Open the PDF with pypdf and return its page count.

    Raises:
        PdfInvalid: missing `%PDF-` header or unparseable document
    """
    with open(pdf_path, "rb") as f:
        header = f.read(len(PDF_HEADER))
    if header != PDF_HEADER:
        raise PdfInvalid(details={"reason": "missing PDF header"})
    try:
        reader = pypdf.PdfReader(str(pdf_path))
        if reader.is_encrypted:
            reader.decrypt("")
        return len(reader.pages)
    except Exception as e:
        logger.warning("PDF could not be parsed: %s", e)
        raise PdfInvalid(details={"reason": str(e)}) from e


def render_pdf_pages(
    pdf_path: Path,
    reaper: ResourceReaper,
    *,
    dpi: int = PDF_RENDER_DPI,
) -> list[PageImage]:
    """Rasterize every page to `page_###.png` in the workspace.

    Page files are tracked before they are written so partial output is
    cleaned up even when rendering fails midway.
    """
    scale = dpi / 72.0  # PDF points are 1/72 inch
    pages: list[PageImage] = []
    try:
        doc = pdfium.PdfDocument(str(pdf_path))
    except Exception as e:
        raise PdfConversionFailed(details={"reason": str(e)}) from e

    try:
        for page_index in range(1, len(doc) + 1):
            out_file = reaper.track(
                reaper.workspace / PAGE_IMAGE_NAME.format(index=page_index)
            )
            page = doc[page_index - 1]
            try:
                image = page.render(scale=scale).to_pil().convert("RGB")
                image.save(out_file, format="PNG")
            finally:
                page.close()
            pages.append(
                PageImage(index=page_index, image_path=out_file, source=pdf_path.name)
            )
    except Exception as e:
        logger.error(
            "PDF rendering failed after %d page(s): %s",
            len(pages),
            e,
            extra={"error_code": "PDF_CONVERSION_FAILED"},
        )
        raise PdfConversionFailed(details={"reason": str(e)}) from e
    finally:
        doc.close()

    if not pages:
        raise PdfConversionFailed(details={"reason": "no pages rendered"})
    return pages


def normalize_document(
    validated: ValidatedDocument,
    reaper: ResourceReaper,
    *,
    max_pages: int = MAX_PDF_PAGES,
    dpi: int = PDF_RENDER_DPI,
) -> list[PageImage]:
    """Produce page images for OCR, 1-based and in document order.

    Raises:
        PdfInvalid: declared PDF is not a readable PDF
        TooManyPages: page count exceeds `max_pages` (checked before rendering)
        PdfConversionFailed: rasterization failed or produced nothing
    """
    input_path = materialize_upload(validated, reaper)
    source = validated.document.filename

    if validated.file_type != "pdf":
        return [PageImage(index=1, image_path=input_path, source=source)]

    page_count = count_pdf_pages(input_path)
    logger.info("PDF opened", extra={"page_count": page_count})
    if page_count > max_pages:
        raise TooManyPages(page_count=page_count, max_pages=max_pages)
    if page_count == 0:
        raise PdfConversionFailed(details={"reason": "PDF has no pages"})

    pages = render_pdf_pages(input_path, reaper, dpi=dpi)
    return [PageImage(index=p.index, image_path=p.image_path, source=source) for p in pages]
