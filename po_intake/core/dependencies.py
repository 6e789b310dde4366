"""FastAPI dependency injection functions.

Routes receive the pipeline and the pool owner from app state, which keeps
them replaceable in tests via `app.dependency_overrides`.
"""

from typing import Optional

from fastapi import HTTPException, Request, status

from po_intake.pipeline.core.database_manager import DatabaseManager
from po_intake.pipeline.orchestrator import IntakePipeline


async def get_pipeline(request: Request) -> IntakePipeline:
    """Get the intake pipeline from app state.

    Raises:
        HTTPException: 503 if the pipeline was not initialized
    """
    pipeline = getattr(request.app.state, "pipeline", None)

    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Intake pipeline unavailable",
        )

    return pipeline


async def get_db_manager(request: Request) -> Optional[DatabaseManager]:
    """Get the mapping store pool owner, or None when running in-memory."""
    return getattr(request.app.state, "db_manager", None)


async def get_detector_name(request: Request) -> Optional[str]:
    detector = getattr(request.app.state, "detector", None)
    return getattr(detector, "name", None)
