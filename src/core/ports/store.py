"""
Persistent Table Store Interface.

Protocol for the relational store behind the Content Store Adapter.
Rows are plain dicts keyed by column name; the store generates nothing
except what the caller hands it.

Access control:
- actor_id identifies the caller's account (None = anonymous visitor).
- Stores enforce their own row-level policy and raise StoreError
  (permission_denied=True) on rejection.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol
from uuid import UUID

Row = dict[str, Any]
OrderBy = Sequence[tuple[str, bool]]  # (column, ascending)


class TableStorePort(Protocol):
    """Typed-row CRUD with ordering, equality filters and limits."""

    def select(
        self,
        table: str,
        *,
        order: OrderBy = (),
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        actor_id: UUID | None = None,
    ) -> list[Row]:
        """Return matching rows (empty list when none match)."""
        ...

    def insert(self, table: str, row: Row, *, actor_id: UUID | None = None) -> Row:
        """Insert one row and return it as stored."""
        ...

    def update(
        self, table: str, row_id: str, fields: Row, *, actor_id: UUID | None = None
    ) -> Row | None:
        """Update one row by id. Returns the stored row, or None if no row matched."""
        ...

    def delete(self, table: str, row_id: str, *, actor_id: UUID | None = None) -> bool:
        """Delete one row by id. Returns False if no row matched."""
        ...
