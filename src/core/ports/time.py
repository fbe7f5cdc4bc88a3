"""
Time Interface.

All timestamps are UTC. Injected so derived statistics and write stamps
are deterministic under test.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time (timezone-aware)."""
        ...
