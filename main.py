"""
Shared counter server entry point.
"""
import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Settings, get_config
from counter import BroadcastHub, CounterStore, ResetScheduler, create_store
from server import app, build_service, set_service
from server.logging_config import log_timing, setup_logging

# Initialize logging before anything else
setup_logging(get_config())
logger = logging.getLogger(__name__)

# Upper bound on waiting for observers to receive the last value at shutdown
SHUTDOWN_FLUSH_TIMEOUT_SECONDS = 5.0


def scheduler_factory(settings: Settings):
    """Return a factory building the daily reset scheduler, or None if disabled."""
    if not settings.reset.enabled:
        return None

    def build(store: CounterStore, hub: BroadcastHub) -> ResetScheduler:
        return ResetScheduler(
            store, hub, at=settings.reset.at, tz=settings.reset.timezone
        )

    return build


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire the counter service for the lifetime of the server."""
    settings = get_config()

    logger.info("Starting counter server")
    logger.info("Storage backend: %s", settings.storage)

    service = build_service(create_store(settings), scheduler_factory(settings))
    set_service(service)

    if service.scheduler is not None:
        logger.info(
            "Daily reset at %s %s",
            settings.reset.at.strftime("%H:%M"),
            settings.reset.timezone,
        )
        service.scheduler.start()
    else:
        logger.info("Daily reset disabled")

    yield

    logger.info("Shutting down counter server...")
    if service.scheduler is not None:
        await service.scheduler.stop()
    try:
        with log_timing(logger, "Observer flush", logging.INFO):
            await asyncio.wait_for(service.hub.flush(), SHUTDOWN_FLUSH_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning("Timed out flushing %d observers", service.hub.observer_count)
    await service.hub.close()
    await service.store.close()
    set_service(None)
    logger.info("Counter server stopped")


app.router.lifespan_context = lifespan


def main() -> None:
    """Start the counter server."""
    settings = get_config()

    logger.info("Server listening on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
