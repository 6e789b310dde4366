"""
Centralized application settings using Pydantic.

All environment variables are read once at startup and validated.
Use this instead of scattered os.getenv() calls throughout the codebase.
"""

from typing import Literal, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings

from po_intake.pipeline.config import constants


class PipelineSettings(BaseSettings):
    """Upload and processing limits (env prefix `PIPELINE_`)."""

    MAX_FILE_SIZE: int = constants.MAX_FILE_SIZE
    MIN_FILE_SIZE: int = constants.MIN_FILE_SIZE
    MAX_PDF_PAGES: int = constants.MAX_PDF_PAGES
    MIN_OCR_CONFIDENCE: float = constants.MIN_OCR_CONFIDENCE
    MAX_LINE_ITEMS: int = constants.MAX_LINE_ITEMS
    OCR_TIMEOUT_SECONDS: float = constants.OCR_TIMEOUT_SECONDS
    OCR_CONCURRENCY: int = constants.OCR_CONCURRENCY
    PDF_RENDER_DPI: int = constants.PDF_RENDER_DPI
    WORK_DIR: Optional[str] = None  # system temp dir when unset

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "env_prefix": "PIPELINE_",
        "extra": "ignore",
    }


class OCRSettings(BaseSettings):
    """Text-detector backend configuration."""

    OCR_BACKEND: Literal["tesseract", "http"] = "tesseract"
    OCR_BASE_URL: str = ""
    OCR_LANGUAGE: str = constants.OCR_LANGUAGE
    OCR_VERIFY_SSL: bool = True

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class DatabaseSettings(BaseSettings):
    """Inventory-mapping store connection and pool configuration.

    DB_HOST is optional: without it the service runs on an empty
    in-memory mapping store and reports degraded health.
    """

    DB_HOST: Optional[str] = None
    DB_PORT: int = 5432
    DB_NAME: str = "po_intake"
    DB_USER: str = "postgres"
    DB_PASSWORD: SecretStr = SecretStr("")
    DB_POOL_MIN_SIZE: int = 1
    DB_POOL_MAX_SIZE: int = 10
    DB_POOL_TIMEOUT: float = 10.0
    DB_COMMAND_TIMEOUT: float = 10.0

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class AppSettings(BaseSettings):
    """General application settings."""

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


# Singleton instances - loaded once at module import
pipeline_settings = PipelineSettings()
ocr_settings = OCRSettings()
db_settings = DatabaseSettings()
app_settings = AppSettings()
