"""
State change events pushed to observers.
"""

from typing import Any

from pydantic import BaseModel

MESSAGE_TYPE = "counter"


class StateChangeEvent(BaseModel):
    """Snapshot of the counter produced by a store read or write.

    ``version`` is assigned by the store in the same atomic step as ``value``
    and only ever grows, so consumers can discard stale snapshots.
    """

    value: int
    version: int

    def to_message(self) -> dict[str, Any]:
        """Wire payload sent to observers."""
        return {"type": MESSAGE_TYPE, "value": self.value}
