"""CounterStore protocol shared by all storage backends."""

from typing import Protocol

from ..events import StateChangeEvent


class CounterStore(Protocol):
    """Durable holder of the single shared counter.

    Every write is one indivisible operation against the backing medium, so
    callers never need their own locking to avoid lost updates.
    """

    name: str

    async def read(self) -> int:
        """Return the current value."""
        ...

    async def snapshot(self) -> StateChangeEvent:
        """Return the current value together with its write version."""
        ...

    async def apply_delta(self, delta: int) -> StateChangeEvent:
        """Atomically add ``delta`` and return the committed state."""
        ...

    async def reset(self) -> StateChangeEvent:
        """Atomically force the value to zero and return the committed state."""
        ...

    async def close(self) -> None:
        """Release any resources held by the backend."""
        ...
