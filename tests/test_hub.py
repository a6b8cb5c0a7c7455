"""Tests for the broadcast hub."""

import asyncio

import pytest

from counter import BroadcastHub, Observer, StateChangeEvent, StorageUnavailable

from .conftest import BrokenChannel, OfflineStore, RecordingChannel


class TestRegister:
    """Tests for observer registration."""

    @pytest.mark.asyncio
    async def test_new_observer_receives_current_value(self, store, hub):
        await store.apply_delta(4)
        channel = RecordingChannel()

        await hub.register(channel)
        await hub.flush()

        assert channel.messages == [{"type": "counter", "value": 4}]
        assert hub.observer_count == 1

    @pytest.mark.asyncio
    async def test_join_push_precedes_later_publish(self, store, hub):
        channel = RecordingChannel()
        await hub.register(channel)

        hub.publish(await store.apply_delta(1))
        await hub.flush()

        assert channel.values == [0, 1]

    @pytest.mark.asyncio
    async def test_join_push_delivered_once(self, store, hub):
        channel = RecordingChannel()

        await hub.register(channel)
        await hub.flush()
        await hub.flush()

        assert channel.values == [0]

    @pytest.mark.asyncio
    async def test_storage_failure_propagates_and_does_not_register(self):
        hub = BroadcastHub(OfflineStore())

        with pytest.raises(StorageUnavailable):
            await hub.register(RecordingChannel())

        assert hub.observer_count == 0


class TestUnregister:
    """Tests for observer removal."""

    @pytest.mark.asyncio
    async def test_unregister_is_idempotent(self, hub):
        observer = await hub.register(RecordingChannel())

        await hub.unregister(observer)
        await hub.unregister(observer)

        assert hub.observer_count == 0

    @pytest.mark.asyncio
    async def test_unregister_unknown_observer_leaves_others(self, store, hub):
        channel = RecordingChannel()
        await hub.register(channel)

        await hub.unregister(Observer(RecordingChannel()))
        hub.publish(await store.apply_delta(1))
        await hub.flush()

        assert hub.observer_count == 1
        assert channel.values[-1] == 1

    @pytest.mark.asyncio
    async def test_unregistered_observer_gets_nothing_more(self, store, hub):
        channel = RecordingChannel()
        observer = await hub.register(channel)
        await hub.flush()

        await hub.unregister(observer)
        hub.publish(await store.apply_delta(1))
        await hub.flush()

        assert channel.values == [0]


class TestPublish:
    """Tests for fan-out delivery."""

    @pytest.mark.asyncio
    async def test_publish_reaches_every_observer(self, store, hub):
        channels = [RecordingChannel() for _ in range(3)]
        for channel in channels:
            await hub.register(channel)
        await hub.flush()

        hub.publish(await store.apply_delta(2))
        await hub.flush()

        for channel in channels:
            assert channel.values == [0, 2]

    @pytest.mark.asyncio
    async def test_failed_observer_is_removed_and_others_still_served(self, store, hub):
        healthy = RecordingChannel()
        broken = BrokenChannel()
        await hub.register(healthy)
        broken_observer = await hub.register(broken)
        await hub.flush()

        hub.publish(await store.apply_delta(1))
        await hub.flush()

        assert healthy.values == [0, 1]
        assert broken.attempts == 1
        assert not hub.is_registered(broken_observer)
        assert hub.observer_count == 1

    @pytest.mark.asyncio
    async def test_unexpected_channel_error_removes_observer(self, hub):
        class ExplodingChannel:
            async def send(self, message):
                raise ValueError("boom")

        observer = await hub.register(ExplodingChannel())
        await hub.flush()

        assert not hub.is_registered(observer)

    @pytest.mark.asyncio
    async def test_slow_observer_sees_increasing_subsequence(self, hub):
        slow = RecordingChannel(delay=0.01)
        await hub.register(slow)

        for version in range(1, 11):
            hub.publish(StateChangeEvent(value=version * 10, version=version))
            await asyncio.sleep(0.003)
        await hub.flush()

        assert slow.values == sorted(slow.values)
        assert len(set(slow.values)) == len(slow.values)
        assert slow.values[-1] == 100

    @pytest.mark.asyncio
    async def test_stale_snapshot_is_dropped(self, hub):
        channel = RecordingChannel()
        await hub.register(channel)

        hub.publish(StateChangeEvent(value=5, version=5))
        await hub.flush()
        hub.publish(StateChangeEvent(value=3, version=3))
        await hub.flush()

        assert channel.values == [0, 5]

    @pytest.mark.asyncio
    async def test_publish_does_not_wait_for_delivery(self, hub):
        slow = RecordingChannel(delay=0.05)
        await hub.register(slow)
        await hub.flush()

        hub.publish(StateChangeEvent(value=1, version=1))

        assert slow.values == [0]
        await hub.flush()
        assert slow.values == [0, 1]

    @pytest.mark.asyncio
    async def test_register_during_publish_burst(self, store, hub):
        first = RecordingChannel()
        await hub.register(first)

        async def churn():
            for _ in range(5):
                observer = await hub.register(RecordingChannel())
                await hub.unregister(observer)

        async def burst():
            for _ in range(20):
                hub.publish(await store.apply_delta(1))
                await asyncio.sleep(0)

        await asyncio.gather(churn(), burst())
        await hub.flush()

        assert first.values[-1] == 20
        assert hub.observer_count == 1


class TestClose:
    """Tests for hub shutdown."""

    @pytest.mark.asyncio
    async def test_close_unregisters_everyone(self, hub):
        for _ in range(3):
            await hub.register(RecordingChannel())

        await hub.close()

        assert hub.observer_count == 0
