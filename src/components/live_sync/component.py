"""
LiveSyncController - keeps the portfolio view current.

Change events from every watched table are pushed onto a single asyncio
queue; one consumer task drains it, waits out the debounce window, and
starts one re-aggregation for the whole burst.

Aggregations may overlap. Each one takes a sequence number when it starts
and its result is applied only if no later-started build has already been
applied, so the snapshot never moves backwards.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any
from uuid import UUID, uuid4

from src.components.portfolio_view import PortfolioView
from src.domain.entities import ChangeEvent
from src.domain.errors import AggregationError

from .ports import ChangeChannelPort, ViewBuilderPort

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[PortfolioView], None]


class LiveSyncController:
    def __init__(
        self,
        builder: ViewBuilderPort,
        channel: ChangeChannelPort,
        tables: Iterable[str],
        debounce_seconds: float = 0.25,
    ) -> None:
        self._builder = builder
        self._channel = channel
        self.tables = tuple(dict.fromkeys(tables))
        self.debounce_seconds = debounce_seconds

        self._queue: asyncio.Queue[ChangeEvent] | None = None
        self._handles: list[Any] = []
        self._consumer: asyncio.Task[None] | None = None
        self._builds: set[asyncio.Task[None]] = set()
        self._listeners: dict[UUID, SnapshotListener] = {}

        self._next_seq = 0
        self._applied_seq = 0
        self._snapshot: PortfolioView | None = None
        self._error: AggregationError | None = None
        self._running = False

    # --- State ---

    @property
    def snapshot(self) -> PortfolioView | None:
        """Last successfully built view."""
        return self._snapshot

    @property
    def error(self) -> AggregationError | None:
        """Set only while no snapshot has ever been built."""
        return self._error

    @property
    def running(self) -> bool:
        return self._running

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, callback: SnapshotListener) -> Callable[[], None]:
        """Call back with every newly applied snapshot. Returns an unsubscribe."""
        key = uuid4()
        self._listeners[key] = callback

        def remove() -> None:
            self._listeners.pop(key, None)

        return remove

    # --- Lifecycle ---

    async def start(self) -> None:
        """Subscribe to every watched table and build the first snapshot."""
        if self._running:
            return
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
        self._queue = queue

        def enqueue(event: ChangeEvent) -> None:
            # Store writes may publish from worker threads
            loop.call_soon_threadsafe(queue.put_nowait, event)

        self._handles = [self._channel.subscribe(table, enqueue) for table in self.tables]
        self._running = True
        self._consumer = asyncio.create_task(self._consume(queue), name="live-sync-consumer")
        logger.info("Live sync watching %d tables", len(self.tables))

        await self.refresh()

    async def stop(self) -> None:
        """Unsubscribe and cancel all outstanding work."""
        if not self._running:
            return
        self._running = False

        for handle in self._handles:
            self._channel.unsubscribe(handle)
        self._handles = []

        tasks = [t for t in (self._consumer, *self._builds) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._consumer = None
        self._builds.clear()
        self._queue = None
        logger.info("Live sync stopped")

    # --- Aggregation ---

    async def refresh(self) -> PortfolioView | None:
        """Run one aggregation now and return the resulting snapshot."""
        self._next_seq += 1
        await self._aggregate(self._next_seq)
        return self._snapshot

    async def _aggregate(self, seq: int) -> None:
        try:
            view = await self._builder.build_view()
        except AggregationError as e:
            if self._snapshot is None:
                self._error = e
                logger.error("Initial portfolio view build failed: %s", e)
            else:
                logger.exception("Background refresh failed, keeping last snapshot: %s", e)
            return

        if seq <= self._applied_seq:
            logger.debug("Discarding stale snapshot %d (applied %d)", seq, self._applied_seq)
            return

        self._applied_seq = seq
        self._snapshot = replace(view, seq=seq)
        self._error = None

        for callback in list(self._listeners.values()):
            try:
                callback(self._snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")

    async def _consume(self, queue: asyncio.Queue[ChangeEvent]) -> None:
        while True:
            first = await queue.get()
            await asyncio.sleep(self.debounce_seconds)

            coalesced = 1
            while not queue.empty():
                queue.get_nowait()
                coalesced += 1
            logger.debug(
                "Refreshing after %d change event(s), first on %s", coalesced, first.table
            )

            self._next_seq += 1
            task = asyncio.create_task(self._aggregate(self._next_seq))
            self._builds.add(task)
            task.add_done_callback(self._builds.discard)
