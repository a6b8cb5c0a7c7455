"""
Broadcast hub fanning counter snapshots out to connected observers.

Each observer owns a one-slot mailbox and a writer task. ``publish`` only
drops the newest snapshot into every mailbox and returns, so the request
that caused a change never waits on observer I/O. A writer always sends the
newest snapshot it holds, which keeps per-observer delivery in version order
while letting superseded snapshots be skipped.
"""

import asyncio
import logging
import uuid
from typing import Any, Awaitable, Callable, Protocol

from .events import StateChangeEvent
from .exceptions import ObserverDeliveryFailed
from .store import CounterStore

logger = logging.getLogger(__name__)


class Channel(Protocol):
    """Transport handle for one connected viewer."""

    async def send(self, message: dict[str, Any]) -> None:
        """Deliver a message, raising ObserverDeliveryFailed if the peer is gone."""
        ...


class Observer:
    """One connected viewer, identified by ``id``."""

    def __init__(self, channel: Channel) -> None:
        self.id = uuid.uuid4().hex
        self.channel = channel

    def __repr__(self) -> str:
        return f"Observer({self.id[:8]})"


class _Mailbox:
    """Newest-wins pending slot plus the task that drains it.

    The writer starts with the join snapshot, which is always sent first.
    Anything not newer than what was already delivered is skipped.
    """

    def __init__(
        self,
        observer: Observer,
        on_failure: Callable[[Observer], Awaitable[None]],
    ) -> None:
        self.observer = observer
        self._on_failure = on_failure
        self._pending: StateChangeEvent | None = None
        self._delivered_version = -1
        self._ready = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._task: asyncio.Task[None] | None = None

    def start(self, first: StateChangeEvent) -> None:
        self._idle.clear()
        self._task = asyncio.create_task(
            self._run(first), name=f"observer-writer-{self.observer.id[:8]}"
        )

    def offer(self, event: StateChangeEvent) -> None:
        if event.version <= self._delivered_version:
            return
        if self._pending is not None and event.version <= self._pending.version:
            return
        self._pending = event
        self._idle.clear()
        self._ready.set()

    async def wait_idle(self) -> None:
        await self._idle.wait()

    async def stop(self) -> None:
        self._pending = None
        self._idle.set()
        task = self._task
        if task is None or task is asyncio.current_task() or task.done():
            return
        task.cancel()
        await asyncio.wait([task])

    async def _run(self, first: StateChangeEvent) -> None:
        if not await self._deliver(first):
            return
        while True:
            if self._pending is None:
                self._idle.set()
                await self._ready.wait()
            self._ready.clear()
            event, self._pending = self._pending, None
            if event is None or event.version <= self._delivered_version:
                continue
            if not await self._deliver(event):
                return

    async def _deliver(self, event: StateChangeEvent) -> bool:
        try:
            await self.observer.channel.send(event.to_message())
        except ObserverDeliveryFailed as e:
            logger.info("Dropping %r after failed delivery: %s", self.observer, e)
        except Exception:
            logger.exception("Unexpected error delivering to %r", self.observer)
        else:
            self._delivered_version = event.version
            return True
        await self._on_failure(self.observer)
        return False


class BroadcastHub:
    """
    Registry of live observers.

    Membership is only changed from the event loop and never across an
    await, and ``publish`` iterates over a copy, so register/unregister can
    interleave freely with an in-progress publish.
    """

    def __init__(self, store: CounterStore) -> None:
        self._store = store
        self._mailboxes: dict[str, _Mailbox] = {}

    @property
    def observer_count(self) -> int:
        return len(self._mailboxes)

    def is_registered(self, observer: Observer) -> bool:
        return observer.id in self._mailboxes

    async def register(self, channel: Channel) -> Observer:
        """
        Add an observer and send it the current counter value as its first push.

        The observer joins before the store is read so a publish racing with
        the read is not missed. It is delivered after the join snapshot if it
        is newer.

        Raises:
            StorageUnavailable: If the current value cannot be read. The
                observer is not left registered.
        """
        observer = Observer(channel)
        mailbox = _Mailbox(observer, self.unregister)
        self._mailboxes[observer.id] = mailbox
        try:
            snapshot = await self._store.snapshot()
        except BaseException:
            await self.unregister(observer)
            raise
        if observer.id in self._mailboxes:
            mailbox.start(snapshot)
        logger.info("Registered %r (%d connected)", observer, self.observer_count)
        return observer

    async def unregister(self, observer: Observer) -> None:
        """Remove an observer. Unknown or already removed observers are ignored."""
        mailbox = self._mailboxes.pop(observer.id, None)
        if mailbox is None:
            return
        logger.info("Unregistered %r (%d connected)", observer, self.observer_count)
        await mailbox.stop()

    def publish(self, event: StateChangeEvent) -> None:
        """Queue a snapshot for every registered observer without waiting."""
        mailboxes = list(self._mailboxes.values())
        logger.debug(
            "Publishing value=%d version=%d to %d observers",
            event.value,
            event.version,
            len(mailboxes),
        )
        for mailbox in mailboxes:
            mailbox.offer(event)

    async def flush(self) -> None:
        """Wait until every observer has been sent its newest snapshot."""
        await asyncio.gather(*(m.wait_idle() for m in list(self._mailboxes.values())))

    async def close(self) -> None:
        """Unregister every observer."""
        for mailbox in list(self._mailboxes.values()):
            await self.unregister(mailbox.observer)
