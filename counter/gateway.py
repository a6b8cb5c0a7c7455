"""
Request-facing façade for counter updates.
"""

import logging

from .hub import BroadcastHub
from .store import CounterStore

logger = logging.getLogger(__name__)


class UpdateGateway:
    """
    Applies client deltas through the store and hands results to the hub.

    The caller waits for the store commit only. Delivery to observers happens
    on the hub's writer tasks after this returns.
    """

    def __init__(self, store: CounterStore, hub: BroadcastHub) -> None:
        self.store = store
        self.hub = hub

    async def increment(self) -> int:
        return await self.apply(1)

    async def decrement(self) -> int:
        return await self.apply(-1)

    async def apply(self, delta: int) -> int:
        """Commit ``delta`` and publish the new value.

        Raises:
            StorageUnavailable: If the store rejects the write; nothing is
                published in that case.
        """
        event = await self.store.apply_delta(delta)
        logger.info("Counter %+d -> %d", delta, event.value)
        self.hub.publish(event)
        return event.value

    async def current_value(self) -> int:
        return await self.store.read()
