"""
In-process change-notification channel.

The SQLite store publishes a ChangeEvent after every committed write;
listeners subscribe per table. Delivery is synchronous on the publishing
thread, so listeners must hand work off rather than block.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from uuid import UUID, uuid4

from src.core.ports.changes import ChangeCallback
from src.domain.entities import ChangeEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subscription:
    id: UUID
    table: str


class InMemoryChangeChannel:
    """Table-scoped publish/subscribe for row change events."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[str, dict[UUID, ChangeCallback]] = {}

    def subscribe(self, table: str, on_event: ChangeCallback) -> Subscription:
        handle = Subscription(id=uuid4(), table=table)
        with self._lock:
            self._listeners.setdefault(table, {})[handle.id] = on_event
        return handle

    def unsubscribe(self, handle: Subscription) -> None:
        with self._lock:
            listeners = self._listeners.get(handle.table)
            if listeners is not None:
                listeners.pop(handle.id, None)
                if not listeners:
                    del self._listeners[handle.table]

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            callbacks = list(self._listeners.get(event.table, {}).values())
        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Change listener failed for table %s", event.table)

    def listener_count(self, table: str | None = None) -> int:
        with self._lock:
            if table is not None:
                return len(self._listeners.get(table, {}))
            return sum(len(v) for v in self._listeners.values())
