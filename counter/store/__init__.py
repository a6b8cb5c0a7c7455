"""
Counter storage backends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import CounterStore
from .jsonbin import JsonBinCounterStore
from .memory import MemoryCounterStore
from .sqlite import SQLiteCounterStore

if TYPE_CHECKING:
    from config import Settings


def create_store(settings: "Settings") -> CounterStore:
    """Build the storage backend selected by configuration."""
    if settings.storage == "memory":
        return MemoryCounterStore()
    if settings.storage == "jsonbin":
        if not settings.jsonbin.bin_id or not settings.jsonbin.api_key:
            raise ValueError("jsonbin storage requires BIN_ID and API_KEY")
        return JsonBinCounterStore(
            settings.jsonbin.bin_id,
            settings.jsonbin.api_key,
            base_url=settings.jsonbin.base_url,
            timeout=settings.jsonbin.timeout,
        )
    return SQLiteCounterStore(settings.sqlite_path)


__all__ = [
    "CounterStore",
    "MemoryCounterStore",
    "SQLiteCounterStore",
    "JsonBinCounterStore",
    "create_store",
]
