"""
Shared counter API server.

HTTP, WebSocket and SSE bindings around the counter core.
"""

from .app import app
from .routes import register_routes
from .state import CounterService, build_service, get_service, set_service

# Register all routes with the app
register_routes(app)

__all__ = ["app", "CounterService", "build_service", "get_service", "set_service"]
