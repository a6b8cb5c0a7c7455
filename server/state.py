"""
Server-side state management.

Holds the counter service wired up by the application lifespan. The counter
itself lives in the store; this module only keeps references to the
components the routes talk to.
"""

from dataclasses import dataclass
from typing import Callable

from counter import BroadcastHub, CounterStore, ResetScheduler, UpdateGateway


@dataclass
class CounterService:
    """Wired counter components shared by all routes."""

    store: CounterStore
    hub: BroadcastHub
    gateway: UpdateGateway
    scheduler: ResetScheduler | None = None


def build_service(
    store: CounterStore,
    scheduler_factory: Callable[[CounterStore, BroadcastHub], ResetScheduler] | None = None,
) -> CounterService:
    """Wire store, hub and gateway, plus a scheduler if a factory is given."""
    hub = BroadcastHub(store)
    gateway = UpdateGateway(store, hub)
    scheduler = scheduler_factory(store, hub) if scheduler_factory else None
    return CounterService(store=store, hub=hub, gateway=gateway, scheduler=scheduler)


# =============================================================================
# Service Management
# =============================================================================

_service: CounterService | None = None


def set_service(service: CounterService | None) -> None:
    """Set the counter service. Called by the application lifespan."""
    global _service
    _service = service


def get_service() -> CounterService:
    """Get the current counter service."""
    if _service is None:
        raise RuntimeError("Counter service is not configured")
    return _service
