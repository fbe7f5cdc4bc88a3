"""
Admin component port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from src.domain.schema import EntitySchema


class RepositoryPort(Protocol):
    """Write side of a Repository."""

    schema: EntitySchema[Any]

    @property
    def table(self) -> str:
        ...

    def list(self, *, actor_id: UUID | None = None) -> list[Any]:
        ...

    def get_one(
        self, filters: dict[str, Any] | None = None, *, actor_id: UUID | None = None
    ) -> Any | None:
        ...

    def create(self, fields: dict[str, Any], owner_id: UUID | None) -> Any:
        ...

    def update(self, entity_id: UUID | str, fields: dict[str, Any], actor_id: UUID) -> Any:
        ...

    def delete(self, entity_id: UUID | str, actor_id: UUID) -> bool:
        ...
