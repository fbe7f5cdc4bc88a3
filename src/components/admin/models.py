"""
Admin component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MutationResult:
    """Outcome of an admin write plus the refreshed collection."""

    table: str
    entity: Any | None
    items: tuple[Any, ...]
    deleted: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "entity": self.entity.model_dump(mode="json") if self.entity is not None else None,
            "items": [item.model_dump(mode="json") for item in self.items],
            "deleted": self.deleted,
        }
