"""
Change-Notification Channel Interface.

Emits a ChangeEvent whenever rows of a watched table are inserted,
updated or deleted. Reconnection and backoff belong to the channel.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from src.domain.entities import ChangeEvent

ChangeCallback = Callable[[ChangeEvent], None]


class ChangeChannelPort(Protocol):
    def subscribe(self, table: str, on_event: ChangeCallback) -> Any:
        """Register a listener for one table. Returns an opaque handle."""
        ...

    def unsubscribe(self, handle: Any) -> None:
        """Remove a listener. Unknown handles are ignored."""
        ...


class ChangePublisherPort(Protocol):
    def publish(self, event: ChangeEvent) -> None:
        """Deliver an event to the table's listeners."""
        ...
