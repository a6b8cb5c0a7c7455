"""
Health check endpoint.
"""

from fastapi import APIRouter

from ..state import get_service


router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    service = get_service()
    scheduler = service.scheduler
    next_reset = (
        scheduler.next_fire_time.isoformat()
        if scheduler is not None and scheduler.next_fire_time is not None
        else None
    )
    return {
        "status": "ok",
        "storage": service.store.name,
        "observers": service.hub.observer_count,
        "next_reset": next_reset,
    }
