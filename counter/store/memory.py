"""In-process counter store for tests and local development."""

from ..events import StateChangeEvent


class MemoryCounterStore:
    """
    Counter held in process memory.

    Each operation runs without suspending the event loop, which makes it a
    single critical section with respect to every other coroutine.
    """

    name = "memory"

    def __init__(self, initial: int = 0) -> None:
        self._value = initial
        self._version = 0

    async def read(self) -> int:
        return self._value

    async def snapshot(self) -> StateChangeEvent:
        return StateChangeEvent(value=self._value, version=self._version)

    async def apply_delta(self, delta: int) -> StateChangeEvent:
        self._value += delta
        self._version += 1
        return StateChangeEvent(value=self._value, version=self._version)

    async def reset(self) -> StateChangeEvent:
        self._value = 0
        self._version += 1
        return StateChangeEvent(value=self._value, version=self._version)

    async def close(self) -> None:
        pass
