"""
Counter query and update endpoints.
"""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from counter import StorageUnavailable

from ..logging_config import log_timing
from ..state import get_service

logger = logging.getLogger(__name__)

router = APIRouter()


class CounterValue(BaseModel):
    value: int


def _unavailable(error: StorageUnavailable) -> HTTPException:
    logger.warning("Counter request failed: %s", error)
    return HTTPException(status_code=503, detail=str(error))


@router.get("/count")
async def get_count() -> CounterValue:
    """Return the current counter value."""
    try:
        value = await get_service().gateway.current_value()
    except StorageUnavailable as e:
        raise _unavailable(e)
    return CounterValue(value=value)


@router.post("/increment")
async def increment() -> CounterValue:
    """Add one to the counter and broadcast the new value."""
    try:
        with log_timing(logger, "Counter increment"):
            value = await get_service().gateway.increment()
    except StorageUnavailable as e:
        raise _unavailable(e)
    return CounterValue(value=value)


@router.post("/decrement")
async def decrement() -> CounterValue:
    """Subtract one from the counter and broadcast the new value."""
    try:
        with log_timing(logger, "Counter decrement"):
            value = await get_service().gateway.decrement()
    except StorageUnavailable as e:
        raise _unavailable(e)
    return CounterValue(value=value)
