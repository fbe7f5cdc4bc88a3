"""
AdminController - owner-gated mutations for every collection.

Each operation checks the owner session first (no store call otherwise),
then validates, then writes, then re-lists the collection so the caller
sees the mutation without waiting for a change event.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any
from uuid import UUID

from src.components.bootstrap import require_owner
from src.domain.entities import Session
from src.domain.errors import NotFoundError, ValidationError

from .models import MutationResult
from .ports import RepositoryPort

logger = logging.getLogger(__name__)

PROFILE_TABLE = "profiles"
CONTACT_TABLE = "contact_messages"


class AdminController:
    def __init__(self, repositories: Iterable[RepositoryPort]) -> None:
        self._repos = {repo.table: repo for repo in repositories}

    @property
    def tables(self) -> tuple[str, ...]:
        return tuple(self._repos)

    def _repo(self, table: str) -> RepositoryPort:
        try:
            return self._repos[table]
        except KeyError:
            raise NotFoundError(f"Unknown collection: {table}", table=table) from None

    def _refresh(self, repo: RepositoryPort, actor_id: UUID) -> tuple[Any, ...]:
        return tuple(repo.list(actor_id=actor_id))

    # --- Reads ---

    def list(self, session: Session | None, table: str) -> list[Any]:
        owner = require_owner(session)
        return self._repo(table).list(actor_id=owner.account_id)

    def list_all(self, session: Session | None) -> dict[str, list[Any]]:
        """Every collection at once, for the dashboard."""
        owner = require_owner(session)
        return {
            table: repo.list(actor_id=owner.account_id) for table, repo in self._repos.items()
        }

    # --- Writes ---

    def create(
        self, session: Session | None, table: str, fields: dict[str, Any]
    ) -> MutationResult:
        owner = require_owner(session)
        if table == CONTACT_TABLE:
            raise ValidationError(message="Contact messages are only created by visitors")
        repo = self._repo(table)

        entity = repo.create(fields, owner_id=owner.account_id)
        return MutationResult(table, entity, self._refresh(repo, owner.account_id))

    def update(
        self,
        session: Session | None,
        table: str,
        entity_id: UUID | str,
        fields: dict[str, Any],
    ) -> MutationResult:
        owner = require_owner(session)
        repo = self._repo(table)

        entity = repo.update(entity_id, fields, actor_id=owner.account_id)
        return MutationResult(table, entity, self._refresh(repo, owner.account_id))

    def delete(
        self, session: Session | None, table: str, entity_id: UUID | str
    ) -> MutationResult:
        owner = require_owner(session)
        repo = self._repo(table)

        if not repo.delete(entity_id, actor_id=owner.account_id):
            raise NotFoundError(f"{repo.schema.name} {entity_id} not found", table=table)
        return MutationResult(
            table, None, self._refresh(repo, owner.account_id), deleted=True
        )

    def upsert_profile(self, session: Session | None, fields: dict[str, Any]) -> MutationResult:
        """Update the displayed profile row, or create it if there is none."""
        owner = require_owner(session)
        repo = self._repo(PROFILE_TABLE)

        existing = repo.get_one(actor_id=owner.account_id)
        if existing is None:
            entity = repo.create(fields, owner_id=owner.account_id)
        else:
            entity = repo.update(existing.id, fields, actor_id=owner.account_id)
        logger.info("Profile saved (%s)", "created" if existing is None else "updated")
        return MutationResult(PROFILE_TABLE, entity, self._refresh(repo, owner.account_id))

    def mark_read(
        self, session: Session | None, message_id: UUID | str, read: bool = True
    ) -> MutationResult:
        return self.update(session, CONTACT_TABLE, message_id, {"read": read})
