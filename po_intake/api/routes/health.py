from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from po_intake import __version__
from po_intake.api.schemas import HealthResponse
from po_intake.core.dependencies import get_db_manager, get_detector_name
from po_intake.pipeline.core.database_manager import DatabaseManager

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(
    db: Optional[DatabaseManager] = Depends(get_db_manager),
    detector_name: Optional[str] = Depends(get_detector_name),
):
    if db is None:
        # in-memory store: service answers but cannot resolve any line
        return JSONResponse(
            status_code=200,
            content={
                "status": "degraded",
                "service": "po-intake-service",
                "version": __version__,
                "ocr_backend": detector_name,
                "mapping_store": {
                    "status": "in-memory",
                    "latency_ms": None,
                    "error": None,
                },
            },
        )

    db_health = await db.health_check()
    status_code = 200 if db_health["healthy"] else 503

    return JSONResponse(
        status_code=status_code,
        content={
            "status": "healthy" if db_health["healthy"] else "unhealthy",
            "service": "po-intake-service",
            "version": __version__,
            "ocr_backend": detector_name,
            "mapping_store": {
                "status": "connected" if db_health["healthy"] else "disconnected",
                "latency_ms": db_health.get("latency_ms"),
                "error": db_health.get("error"),
            },
        },
    )
