import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from po_intake.core.settings import db_settings, ocr_settings, pipeline_settings
from po_intake.pipeline.clients.factory import build_text_detector
from po_intake.pipeline.core.database_manager import create_database_manager
from po_intake.pipeline.orchestrator import IntakePipeline
from po_intake.pipeline.repositories.inventory_mapping import (
    InMemoryInventoryMappingRepository,
    PostgresInventoryMappingRepository,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown tasks."""

    app.state.db_manager = None
    db_manager = create_database_manager(db_settings)
    if db_manager is None:
        logger.warning("DB_HOST not set, mapping lookups use an empty in-memory store")
    else:
        logger.info("Initializing mapping store connection pool...")
        try:
            await db_manager.connect()
            app.state.db_manager = db_manager
            logger.info("Mapping store pool ready")
        except Exception as e:
            logger.error(f"Mapping store pool initialization failed: {e}", exc_info=True)
            logger.warning("Application will continue without mapping store connectivity")

    if app.state.db_manager is not None:
        repository = PostgresInventoryMappingRepository(app.state.db_manager)
    else:
        repository = InMemoryInventoryMappingRepository()

    detector = build_text_detector(ocr_settings)
    app.state.detector = detector
    app.state.pipeline = IntakePipeline(detector, repository, pipeline_settings)

    yield

    await detector.aclose()
    if app.state.db_manager:
        logger.info("Closing mapping store connection pool...")
        await app.state.db_manager.disconnect()
