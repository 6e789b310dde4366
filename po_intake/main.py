"""FastAPI application entry point."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI

from po_intake import __version__
from po_intake.api.routes import health, ocr
from po_intake.core.error_handlers import register_error_handlers
from po_intake.core.lifespan import lifespan
from po_intake.core.middleware import trace_id_middleware
from po_intake.core.settings import app_settings
from po_intake.core.validation import validate_all_settings
from po_intake.pipeline.core.logging_config import configure_structured_logging

# Configure logging
configure_structured_logging(level=app_settings.LOG_LEVEL, json_format=app_settings.LOG_JSON)
logger = logging.getLogger(__name__)

# Validate environment before starting application
validate_all_settings()

# pypdf warns on malformed metadata in scanned PDFs
logging.getLogger("pypdf").setLevel(logging.ERROR)


def create_app() -> FastAPI:
    app = FastAPI(
        title="PO Intake API",
        version=__version__,
        description="Extracts order line items from purchase documents",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.middleware("http")(trace_id_middleware)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(ocr.router)
    return app


app = create_app()
