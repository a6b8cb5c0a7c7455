"""
Shared pytest fixtures for all tests.
"""
import asyncio
from pathlib import Path
from typing import Any

import pytest

from counter import (
    BroadcastHub,
    MemoryCounterStore,
    ObserverDeliveryFailed,
    ResetScheduler,
    SQLiteCounterStore,
    StateChangeEvent,
    StorageUnavailable,
    UpdateGateway,
)


# =============================================================================
# Channels
# =============================================================================

class RecordingChannel:
    """Channel that records every message it is sent."""

    def __init__(self, delay: float = 0.0) -> None:
        self.messages: list[dict[str, Any]] = []
        self.delay = delay

    async def send(self, message: dict[str, Any]) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.messages.append(message)

    @property
    def values(self) -> list[int]:
        return [message["value"] for message in self.messages]


class BrokenChannel:
    """Channel whose peer has gone away."""

    def __init__(self) -> None:
        self.attempts = 0

    async def send(self, message: dict[str, Any]) -> None:
        self.attempts += 1
        raise ObserverDeliveryFailed("connection reset")


# =============================================================================
# Stores
# =============================================================================

class BrokenWritesStore(MemoryCounterStore):
    """Reads succeed, every write is rejected."""

    async def apply_delta(self, delta: int) -> StateChangeEvent:
        raise StorageUnavailable(self.name, "write rejected")

    async def reset(self) -> StateChangeEvent:
        raise StorageUnavailable(self.name, "write rejected")


class OfflineStore(BrokenWritesStore):
    """Backing medium cannot be reached at all."""

    async def read(self) -> int:
        raise StorageUnavailable(self.name, "offline")

    async def snapshot(self) -> StateChangeEvent:
        raise StorageUnavailable(self.name, "offline")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store() -> MemoryCounterStore:
    return MemoryCounterStore()


@pytest.fixture
def hub(store: MemoryCounterStore) -> BroadcastHub:
    return BroadcastHub(store)


@pytest.fixture
def gateway(store: MemoryCounterStore, hub: BroadcastHub) -> UpdateGateway:
    return UpdateGateway(store, hub)


@pytest.fixture
def scheduler(store: MemoryCounterStore, hub: BroadcastHub) -> ResetScheduler:
    return ResetScheduler(store, hub)


@pytest.fixture
def sqlite_store(tmp_path: Path) -> SQLiteCounterStore:
    """SQLite store on a fresh database file."""
    return SQLiteCounterStore(tmp_path / "counter.db")
