"""Application constants and configuration defaults."""

from typing import Final

# =============================================================================
# Upload Limits (defaults; overridable via PipelineSettings)
# =============================================================================

MAX_FILE_SIZE: Final = 10 * 1024 * 1024  # 10MB
MIN_FILE_SIZE: Final = 1024  # 1KB
MAX_PDF_PAGES: Final = 10
MIN_OCR_CONFIDENCE: Final = 60.0
MAX_LINE_ITEMS: Final = 100

FILENAME_MAX_LENGTH: Final = 255
FILENAME_ALLOWED_PATTERN: Final = r"^[A-Za-z0-9._-]+$"

ALLOWED_CONTENT_TYPES: set[str] = {
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
}
ALLOWED_EXTENSIONS: set[str] = {".pdf", ".jpg", ".jpeg", ".png"}

# =============================================================================
# Normalization
# =============================================================================

PDF_HEADER: Final = b"%PDF-"
PDF_RENDER_DPI: Final = 200
PAGE_IMAGE_NAME: Final = "page_{index:03d}.png"
INPUT_FILE: Final = "00_input{ext}"

# =============================================================================
# OCR
# =============================================================================

OCR_TIMEOUT_SECONDS: Final = 30.0  # Per-page deadline
OCR_CONCURRENCY: Final = 1  # 1 = strictly sequential page loop
OCR_LANGUAGE: Final = "eng"
OCR_TESSERACT_CONFIG: Final = "--psm 1"
PAGE_SEPARATOR: Final = "\n\n"

# =============================================================================
# Line Extraction
# =============================================================================

STYLE_MAX_LENGTH: Final = 20
COLOR_MAX_LENGTH: Final = 20
SIZE_MAX_LENGTH: Final = 10
QUANTITY_MIN: Final = 1
QUANTITY_MAX: Final = 10000
HIGH_CONFIDENCE: Final = "high"
DEFAULT_WAREHOUSE: Final = "ATL"

# =============================================================================
# Mapping Store
# =============================================================================

MAPPING_TABLE: Final = "inventory_mappings"
MAX_RETRIES: Final = 3
INITIAL_BACKOFF: Final = 0.2  # seconds
BACKOFF_MULTIPLIER: Final = 2

# =============================================================================
# Error Handling
# =============================================================================

ERROR_BODY_MAX_CHARS: Final = 200  # Maximum chars from error response bodies
