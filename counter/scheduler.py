"""
Daily reset of the counter at a fixed local wall-clock time.
"""

import asyncio
import logging
from datetime import datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import Awaitable, Callable
from zoneinfo import ZoneInfo

from .events import StateChangeEvent
from .exceptions import StorageUnavailable
from .hub import BroadcastHub
from .store import CounterStore

logger = logging.getLogger(__name__)

DEFAULT_RESET_TIME = time(23, 0)
DEFAULT_RESET_TIMEZONE = "Asia/Kolkata"


class SchedulerState(str, Enum):
    IDLE = "idle"
    FIRING = "firing"


def next_trigger(now: datetime, at: time, tz: tzinfo) -> datetime:
    """
    Return the next occurrence of wall-clock ``at`` in ``tz`` strictly after ``now``.

    Args:
        now: Timezone-aware current instant.
        at: Local time of day to fire.
        tz: Time zone the wall-clock time is interpreted in.

    Returns:
        Aware datetime in ``tz``.
    """
    local_now = now.astimezone(tz)
    instant = now.astimezone(timezone.utc)
    candidate = datetime.combine(local_now.date(), at, tzinfo=tz)
    # Same-zone datetimes compare by wall clock, which misorders a DST fold.
    while candidate.astimezone(timezone.utc) <= instant:
        candidate = datetime.combine(
            candidate.date() + timedelta(days=1), at, tzinfo=tz
        )
    return candidate


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResetScheduler:
    """
    Timer task that forces the counter to zero once a day.

    Missed instants (process asleep or restarted) are never fired
    retroactively; the next trigger is always computed from the current time.
    """

    def __init__(
        self,
        store: CounterStore,
        hub: BroadcastHub,
        *,
        at: time = DEFAULT_RESET_TIME,
        tz: str | tzinfo = DEFAULT_RESET_TIMEZONE,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.store = store
        self.hub = hub
        self.at = at
        self.tz = ZoneInfo(tz) if isinstance(tz, str) else tz
        self.state = SchedulerState.IDLE
        self.next_fire_time: datetime | None = None
        self._clock = clock
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="reset-scheduler")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.wait([self._task])
        self._task = None
        self.next_fire_time = None

    async def fire(self) -> StateChangeEvent | None:
        """Reset the counter and publish zero. Storage failures are logged only."""
        self.state = SchedulerState.FIRING
        try:
            event = await self.store.reset()
        except StorageUnavailable as e:
            logger.error("Scheduled reset failed, next attempt at the next trigger: %s", e)
            return None
        finally:
            self.state = SchedulerState.IDLE
        logger.info("Counter reset to %d by schedule", event.value)
        self.hub.publish(event)
        return event

    async def _run(self) -> None:
        while True:
            target = next_trigger(self._clock(), self.at, self.tz)
            self.next_fire_time = target
            logger.info("Next counter reset at %s", target.isoformat())
            while (remaining := (target - self._clock()).total_seconds()) > 0:
                await self._sleep(remaining)
            try:
                await self.fire()
            except Exception:
                logger.exception("Scheduled reset crashed, next attempt at the next trigger")
