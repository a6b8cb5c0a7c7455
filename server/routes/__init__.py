"""
Route registration for the counter API.
"""

from fastapi import FastAPI

from . import counter, health, subscribe


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(counter.router)
    app.include_router(health.router)
    app.include_router(subscribe.router)
