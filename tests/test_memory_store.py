"""Tests for the in-process counter store."""

import asyncio

import pytest

from counter import MemoryCounterStore


class TestMemoryCounterStore:
    """Tests for MemoryCounterStore."""

    @pytest.mark.asyncio
    async def test_starts_at_zero(self):
        store = MemoryCounterStore()

        assert await store.read() == 0
        snapshot = await store.snapshot()
        assert snapshot.value == 0
        assert snapshot.version == 0

    @pytest.mark.asyncio
    async def test_apply_delta_returns_new_value_and_version(self):
        store = MemoryCounterStore(initial=5)

        first = await store.apply_delta(1)
        second = await store.apply_delta(-3)

        assert (first.value, first.version) == (6, 1)
        assert (second.value, second.version) == (3, 2)

    @pytest.mark.asyncio
    async def test_reset_forces_zero_and_bumps_version(self):
        store = MemoryCounterStore(initial=-4)

        event = await store.reset()

        assert event.value == 0
        assert event.version == 1
        assert await store.read() == 0

    @pytest.mark.asyncio
    async def test_concurrent_deltas_are_not_lost(self):
        store = MemoryCounterStore(initial=10)
        deltas = [1, -1, 1, 1, -1, 1] * 20

        await asyncio.gather(*(store.apply_delta(d) for d in deltas))

        assert await store.read() == 10 + sum(deltas)
