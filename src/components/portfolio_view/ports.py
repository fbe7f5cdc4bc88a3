"""
Portfolio view port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.core.ports.time import TimePort
from src.domain.schema import OrderSpec


class CollectionReaderPort(Protocol):
    """Read side of a Repository."""

    @property
    def table(self) -> str:
        ...

    def list(
        self, order_by: OrderSpec | None = None, filters: dict[str, Any] | None = None
    ) -> list[Any]:
        ...

    def get_one(self, filters: dict[str, Any] | None = None) -> Any | None:
        ...


__all__ = ["CollectionReaderPort", "TimePort"]
