"""Application startup validation checks.

Validates limits and backend configuration before the application starts,
so a misconfigured deployment fails at boot rather than on first upload.
"""

import logging
import re

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"^https?://.+")


def collect_settings_problems(pipeline, ocr, db) -> list[str]:
    """Return human-readable problems found in the given settings objects."""
    problems = []

    if pipeline.MIN_FILE_SIZE < 0:
        problems.append("PIPELINE_MIN_FILE_SIZE must not be negative")
    if pipeline.MIN_FILE_SIZE >= pipeline.MAX_FILE_SIZE:
        problems.append(
            f"PIPELINE_MIN_FILE_SIZE ({pipeline.MIN_FILE_SIZE}) must be below "
            f"PIPELINE_MAX_FILE_SIZE ({pipeline.MAX_FILE_SIZE})"
        )
    if pipeline.MAX_PDF_PAGES < 1:
        problems.append("PIPELINE_MAX_PDF_PAGES must be at least 1")
    if not (0 <= pipeline.MIN_OCR_CONFIDENCE <= 100):
        problems.append("PIPELINE_MIN_OCR_CONFIDENCE must be within 0-100")
    if pipeline.MAX_LINE_ITEMS < 1:
        problems.append("PIPELINE_MAX_LINE_ITEMS must be at least 1")
    if pipeline.OCR_TIMEOUT_SECONDS <= 0:
        problems.append("PIPELINE_OCR_TIMEOUT_SECONDS must be positive")
    if pipeline.OCR_CONCURRENCY < 1:
        problems.append("PIPELINE_OCR_CONCURRENCY must be at least 1")
    if pipeline.PDF_RENDER_DPI < 36:
        problems.append("PIPELINE_PDF_RENDER_DPI must be at least 36")

    if ocr.OCR_BACKEND == "http":
        if not ocr.OCR_BASE_URL:
            problems.append("OCR_BASE_URL is required when OCR_BACKEND=http")
        elif not URL_PATTERN.match(ocr.OCR_BASE_URL):
            problems.append(
                f"OCR_BASE_URL={ocr.OCR_BASE_URL} (must start with http:// or https://)"
            )

    if db.DB_HOST:
        if not (1 <= db.DB_PORT <= 65535):
            problems.append(f"DB_PORT must be 1-65535, got {db.DB_PORT}")
        if db.DB_POOL_MIN_SIZE > db.DB_POOL_MAX_SIZE:
            problems.append(
                f"DB_POOL_MIN_SIZE ({db.DB_POOL_MIN_SIZE}) "
                f"cannot exceed DB_POOL_MAX_SIZE ({db.DB_POOL_MAX_SIZE})"
            )

    return problems


def validate_all_settings() -> None:
    """Validate all critical settings at application startup.

    Raises:
        RuntimeError: If any setting is inconsistent
    """
    from po_intake.core.settings import db_settings, ocr_settings, pipeline_settings

    problems = collect_settings_problems(pipeline_settings, ocr_settings, db_settings)
    if problems:
        error_msg = "Invalid configuration:\n" + "\n".join(f"  - {p}" for p in problems)
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    logger.info("All critical settings validated successfully")
    logger.info(f"  - OCR backend: {ocr_settings.OCR_BACKEND}")
    if db_settings.DB_HOST:
        logger.info(
            f"  - Mapping store: {db_settings.DB_HOST}:{db_settings.DB_PORT}/{db_settings.DB_NAME}"
        )
    else:
        logger.warning("  - Mapping store: DB_HOST not set, using in-memory store")
