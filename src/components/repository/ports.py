"""
Repository component port definitions.

Protocol interfaces for external dependencies.
"""

from __future__ import annotations

from src.core.ports.store import TableStorePort
from src.core.ports.time import TimePort

__all__ = ["TableStorePort", "TimePort"]
