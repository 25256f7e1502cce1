"""Health check endpoints."""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_note_store
from services.note_history import utc_now
from services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    storage: str
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
async def health_check(
    store: NoteStore = Depends(get_note_store),
) -> HealthResponse:
    """Check application and storage health."""
    storage_status = "healthy"
    try:
        await store.ping()
    except Exception:
        logger.exception("Storage health check failed")
        storage_status = "unhealthy"

    return HealthResponse(
        status="healthy" if storage_status == "healthy" else "degraded",
        storage=storage_status,
        timestamp=utc_now(),
    )
