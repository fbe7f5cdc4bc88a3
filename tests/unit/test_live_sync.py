"""LiveSyncController: debounced re-aggregation on change events."""

import asyncio
import logging
from datetime import UTC, datetime

from src.adapters.changes import InMemoryChangeChannel
from src.components.live_sync import LiveSyncController
from src.components.portfolio_view import PortfolioStats, PortfolioView
from src.domain.entities import ChangeEvent
from src.domain.errors import AggregationError, StoreError

WATCHED = ["profiles", "projects", "skills"]


def make_view(marker: int) -> PortfolioView:
    return PortfolioView(
        profile=None,
        projects=(),
        skills=(),
        work_experiences=(),
        education=(),
        certificates=(),
        references=(),
        stats=PortfolioStats(marker, 0, 0, 0, 0),
        built_at=datetime.now(UTC),
    )


class FakeBuilder:
    """Counts builds; each build's view is tagged with its call number."""

    def __init__(self, fail_on=(), delays=None):
        self.calls = 0
        self.fail_on = set(fail_on)
        self.delays = dict(delays or {})

    async def build_view(self):
        self.calls += 1
        call = self.calls
        await asyncio.sleep(self.delays.get(call, 0))
        if call in self.fail_on:
            raise AggregationError(StoreError("down"), collection="projects")
        return make_view(call)


def change(table: str = "projects") -> ChangeEvent:
    return ChangeEvent(table=table, kind="insert", row_id="r1")


class TestDebounce:
    def test_burst_of_ten_events_triggers_one_build(self):
        builder = FakeBuilder()
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.05)
            await live.start()
            assert builder.calls == 1  # initial build

            for _ in range(10):
                channel.publish(change())
            await asyncio.sleep(0.3)
            await live.stop()

        asyncio.run(scenario())

        assert builder.calls == 2

    def test_separate_bursts_build_separately(self):
        builder = FakeBuilder()
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.02)
            await live.start()
            channel.publish(change("skills"))
            await asyncio.sleep(0.2)
            channel.publish(change("profiles"))
            await asyncio.sleep(0.2)
            await live.stop()

        asyncio.run(scenario())

        assert builder.calls == 3

    def test_events_from_worker_threads(self):
        builder = FakeBuilder()
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.02)
            await live.start()
            await asyncio.to_thread(channel.publish, change())
            await asyncio.sleep(0.2)
            snapshot = live.snapshot
            await live.stop()
            return snapshot

        snapshot = asyncio.run(scenario())

        assert builder.calls == 2
        assert snapshot.seq == 2

    def test_unwatched_tables_are_ignored(self):
        builder = FakeBuilder()
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.02)
            await live.start()
            channel.publish(change("contact_messages"))
            await asyncio.sleep(0.1)
            await live.stop()

        asyncio.run(scenario())

        assert builder.calls == 1


class TestSnapshots:
    def test_failed_refresh_keeps_last_good_snapshot(self, caplog):
        builder = FakeBuilder(fail_on={2})
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.02)
            await live.start()
            before = live.snapshot
            channel.publish(change())
            await asyncio.sleep(0.2)
            after = live.snapshot
            error = live.error
            await live.stop()
            return before, after, error

        before, after, error = asyncio.run(scenario())

        assert builder.calls == 2
        assert after is before
        assert after.stats.years_experience == 1
        assert error is None

        [record] = [r for r in caplog.records if "Background refresh failed" in r.getMessage()]
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None

    def test_initial_failure_exposes_error_until_recovery(self):
        builder = FakeBuilder(fail_on={1})
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.02)
            await live.start()
            first = (live.snapshot, live.error)
            await live.refresh()
            second = (live.snapshot, live.error)
            await live.stop()
            return first, second

        (snap1, err1), (snap2, err2) = asyncio.run(scenario())

        assert snap1 is None
        assert isinstance(err1, AggregationError)
        assert snap2 is not None
        assert err2 is None

    def test_stale_result_is_discarded(self):
        # Build 1 starts first but finishes after build 2
        builder = FakeBuilder(delays={1: 0.1})
        live = LiveSyncController(builder, InMemoryChangeChannel(), WATCHED)

        async def scenario():
            await asyncio.gather(live.refresh(), live.refresh())
            return live.snapshot

        snapshot = asyncio.run(scenario())

        assert snapshot.stats.years_experience == 2
        assert snapshot.seq == 2

    def test_listeners_receive_each_applied_snapshot(self):
        builder = FakeBuilder()
        channel = InMemoryChangeChannel()
        received = []

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.02)
            remove = live.add_listener(received.append)
            await live.start()
            channel.publish(change())
            await asyncio.sleep(0.2)
            remove()
            channel.publish(change())
            await asyncio.sleep(0.2)
            await live.stop()

        asyncio.run(scenario())

        assert [v.seq for v in received] == [1, 2]


class TestTeardown:
    def test_stop_unsubscribes_every_table(self):
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(FakeBuilder(), channel, WATCHED, debounce_seconds=0.02)
            await live.start()
            subscribed = channel.listener_count()
            await live.stop()
            return subscribed

        assert asyncio.run(scenario()) == 3
        assert channel.listener_count() == 0

    def test_no_builds_after_stop(self):
        builder = FakeBuilder()
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.02)
            await live.start()
            await live.stop()
            channel.publish(change())
            await asyncio.sleep(0.1)
            return live.running

        assert asyncio.run(scenario()) is False
        assert builder.calls == 1

    def test_stop_cancels_pending_debounce(self):
        builder = FakeBuilder()
        channel = InMemoryChangeChannel()

        async def scenario():
            live = LiveSyncController(builder, channel, WATCHED, debounce_seconds=0.5)
            await live.start()
            channel.publish(change())
            await asyncio.sleep(0.05)
            await live.stop()
            await asyncio.sleep(0.6)

        asyncio.run(scenario())

        assert builder.calls == 1
