"""
Shared counter core.

Transport-agnostic store, broadcast hub, update gateway and reset scheduler.
The server package provides HTTP, WebSocket and SSE bindings around these.
"""

from .events import StateChangeEvent
from .exceptions import CounterError, ObserverDeliveryFailed, StorageUnavailable
from .gateway import UpdateGateway
from .hub import BroadcastHub, Channel, Observer
from .scheduler import ResetScheduler, SchedulerState, next_trigger
from .store import (
    CounterStore,
    JsonBinCounterStore,
    MemoryCounterStore,
    SQLiteCounterStore,
    create_store,
)

__all__ = [
    # Exceptions
    "CounterError",
    "StorageUnavailable",
    "ObserverDeliveryFailed",
    # Events
    "StateChangeEvent",
    # Store
    "CounterStore",
    "MemoryCounterStore",
    "SQLiteCounterStore",
    "JsonBinCounterStore",
    "create_store",
    # Hub
    "BroadcastHub",
    "Channel",
    "Observer",
    # Gateway
    "UpdateGateway",
    # Scheduler
    "ResetScheduler",
    "SchedulerState",
    "next_trigger",
]
