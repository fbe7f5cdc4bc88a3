"""Event-driven refresh of the aggregated portfolio view."""

from .component import LiveSyncController, SnapshotListener
from .ports import ChangeChannelPort, ViewBuilderPort

__all__ = [
    "LiveSyncController",
    "SnapshotListener",
    "ChangeChannelPort",
    "ViewBuilderPort",
]
