"""
Content store adapter - generic per-entity repository.

One Repository class, parameterized by an EntitySchema, provides
list/get_one/create/update/delete for every portfolio entity.

Behavior:
- list never fails on "no rows"; it returns an empty list
- get_one returns None when nothing matches; store failures propagate as StoreError
- create/update stamp updated_at; create also stamps created_at and user_id
- ValidationError is raised before any store call
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel

from src.domain.errors import NotFoundError, ValidationError
from src.domain.schema import EntitySchema, OrderSpec

from .ports import TableStorePort, TimePort

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)


class Repository(Generic[E]):
    """CRUD for one entity type against the table store."""

    def __init__(self, schema: EntitySchema[E], store: TableStorePort, time: TimePort) -> None:
        self.schema = schema
        self._store = store
        self._time = time

    @property
    def table(self) -> str:
        return self.schema.table

    def list(
        self,
        order_by: OrderSpec | None = None,
        filters: dict[str, Any] | None = None,
        *,
        limit: int | None = None,
        actor_id: UUID | None = None,
    ) -> list[E]:
        """Ordered rows; display_order ascending then creation order by default."""
        rows = self._store.select(
            self.table,
            order=order_by or self.schema.default_order,
            filters=filters,
            limit=limit,
            actor_id=actor_id,
        )
        return [self.schema.from_row(row) for row in rows]

    def get_one(
        self,
        filters: dict[str, Any] | None = None,
        *,
        order_by: OrderSpec | None = None,
        actor_id: UUID | None = None,
    ) -> E | None:
        """First matching row in schema order, or None."""
        rows = self._store.select(
            self.table,
            order=order_by or self.schema.default_order,
            filters=filters,
            limit=1,
            actor_id=actor_id,
        )
        return self.schema.from_row(rows[0]) if rows else None

    def create(self, fields: dict[str, Any], owner_id: UUID | None) -> E:
        """Validate, stamp and insert a row. owner_id is None only for unowned tables."""
        data = self.schema.prepare_create(fields)

        now = self._time.now_utc()
        data["id"] = uuid4()
        data["created_at"] = now
        data["updated_at"] = now
        if self.schema.owned:
            if owner_id is None:
                raise ValidationError(missing_fields=["user_id"])
            data["user_id"] = owner_id

        stored = self._store.insert(self.table, self.schema.to_row(data), actor_id=owner_id)
        entity = self.schema.from_row(stored)
        logger.info("Created %s %s", self.schema.name, data["id"])
        return entity

    def update(self, entity_id: UUID | str, fields: dict[str, Any], actor_id: UUID) -> E:
        """Validate and apply a partial update. Raises NotFoundError if the row is missing."""
        data = self.schema.prepare_update(fields)
        data["updated_at"] = self._time.now_utc()

        stored = self._store.update(
            self.table, str(entity_id), self.schema.to_row(data), actor_id=actor_id
        )
        if stored is None:
            raise NotFoundError(f"{self.schema.name} {entity_id} not found", table=self.table)
        logger.info("Updated %s %s", self.schema.name, entity_id)
        return self.schema.from_row(stored)

    def delete(self, entity_id: UUID | str, actor_id: UUID) -> bool:
        """Delete a row. Returns False if it did not exist."""
        deleted = self._store.delete(self.table, str(entity_id), actor_id=actor_id)
        if deleted:
            logger.info("Deleted %s %s", self.schema.name, entity_id)
        return deleted
