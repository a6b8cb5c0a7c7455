"""SQLite-backed counter store.

The counter lives in a single row. Deltas and resets are single UPDATE
statements with a RETURNING clause, so SQLite's write lock is the only
serialization point between concurrent writers.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from pathlib import Path

from ..events import StateChangeEvent
from ..exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

COUNTER_ROW_ID = 1
DEFAULT_BUSY_TIMEOUT_MS = 5000


class SQLiteCounterStore:
    """Durable counter stored in a SQLite database file."""

    name = "sqlite"

    def __init__(
        self,
        db_path: str | Path,
        *,
        busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS,
    ) -> None:
        self.db_path = Path(db_path)
        self.busy_timeout_ms = max(100, int(busy_timeout_ms))
        self._initialized = False

    async def read(self) -> int:
        return (await self.snapshot()).value

    async def snapshot(self) -> StateChangeEvent:
        return await self._run(
            "SELECT value, version FROM counter WHERE id = ?",
            (COUNTER_ROW_ID,),
        )

    async def apply_delta(self, delta: int) -> StateChangeEvent:
        return await self._run(
            "UPDATE counter SET value = value + ?, version = version + 1 "
            "WHERE id = ? RETURNING value, version",
            (int(delta), COUNTER_ROW_ID),
        )

    async def reset(self) -> StateChangeEvent:
        return await self._run(
            "UPDATE counter SET value = 0, version = version + 1 "
            "WHERE id = ? RETURNING value, version",
            (COUNTER_ROW_ID,),
        )

    async def close(self) -> None:
        pass

    async def _run(self, sql: str, params: tuple[int, ...]) -> StateChangeEvent:
        try:
            return await asyncio.to_thread(self._execute, sql, params)
        except (sqlite3.Error, OSError) as e:
            logger.error("SQLite operation failed on %s: %s", self.db_path, e)
            raise StorageUnavailable(self.name, str(e)) from e

    def _execute(self, sql: str, params: tuple[int, ...]) -> StateChangeEvent:
        if not self._initialized:
            self._initialize_schema()
        conn = self._connect()
        try:
            with conn:
                rows = conn.execute(sql, params).fetchall()
        finally:
            conn.close()
        if not rows:
            raise sqlite3.DatabaseError("counter row is missing")
        value, version = rows[0]
        return StateChangeEvent(value=value, version=version)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout_ms / 1000)
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout_ms}")
        return conn

    def _initialize_schema(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS counter (
                        id INTEGER PRIMARY KEY CHECK (id = 1),
                        value INTEGER NOT NULL,
                        version INTEGER NOT NULL
                    )
                    """
                )
                conn.execute(
                    "INSERT OR IGNORE INTO counter (id, value, version) VALUES (?, 0, 0)",
                    (COUNTER_ROW_ID,),
                )
        finally:
            conn.close()
        self._initialized = True
        logger.info("Counter database ready at %s", self.db_path)
