"""Generic repository over a fake table store."""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from src.components.repository import Repository
from src.domain.entities import Project
from src.domain.errors import NotFoundError, StoreError, ValidationError
from src.domain.schema import CONTACT_MESSAGE, PROFILE, PROJECT
from tests.conftest import FakeTime


class FakeStore:
    """In-memory TableStorePort that records writes."""

    def __init__(self):
        self.rows: dict[str, list[dict]] = {}
        self.writes: list[tuple[str, str]] = []

    def select(self, table, *, order=(), filters=None, limit=None, actor_id=None):
        rows = [
            r
            for r in self.rows.get(table, [])
            if all(r.get(k) == v for k, v in (filters or {}).items())
        ]
        for col, asc in reversed(order):
            rows.sort(key=lambda r, c=col: r.get(c), reverse=not asc)
        return rows[:limit] if limit is not None else rows

    def insert(self, table, row, *, actor_id=None):
        self.writes.append(("insert", table))
        self.rows.setdefault(table, []).append(dict(row))
        return dict(row)

    def update(self, table, row_id, fields, *, actor_id=None):
        self.writes.append(("update", table))
        for r in self.rows.get(table, []):
            if r["id"] == row_id:
                r.update(fields)
                return dict(r)
        return None

    def delete(self, table, row_id, *, actor_id=None):
        self.writes.append(("delete", table))
        before = len(self.rows.get(table, []))
        self.rows[table] = [r for r in self.rows.get(table, []) if r["id"] != row_id]
        return len(self.rows[table]) < before


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def projects(fake_store):
    return Repository(PROJECT, fake_store, FakeTime())


class TestList:
    def test_empty_table_returns_empty_list(self, projects):
        assert projects.list() == []

    def test_default_order_is_display_order_then_creation(self, fake_store):
        time = FakeTime()
        repo = Repository(PROJECT, fake_store, time)
        owner = uuid4()
        repo.create({"title": "B", "description": "d", "display_order": 1}, owner)
        repo.create({"title": "A", "description": "d", "display_order": 0}, owner)
        repo.create({"title": "C", "description": "d", "display_order": 1}, owner)

        assert [p.title for p in repo.list()] == ["A", "B", "C"]


class TestGetOne:
    def test_absent_is_none_not_error(self, projects):
        assert projects.get_one({"title": "nope"}) is None

    def test_store_failure_propagates(self):
        store = MagicMock()
        store.select.side_effect = StoreError("connection refused", table="profiles")
        repo = Repository(PROFILE, store, FakeTime())

        with pytest.raises(StoreError):
            repo.get_one()


class TestCreate:
    def test_stamps_owner_and_timestamps(self, projects):
        owner = uuid4()
        project = projects.create({"title": "Site", "description": "Portfolio"}, owner)

        assert isinstance(project, Project)
        assert project.user_id == owner
        assert project.created_at == FakeTime().now
        assert project.updated_at == FakeTime().now

    def test_missing_required_performs_no_write(self, projects, fake_store):
        with pytest.raises(ValidationError) as exc:
            projects.create({"title": "Site"}, uuid4())

        assert exc.value.missing_fields == ("description",)
        assert fake_store.writes == []

    def test_owned_entity_requires_owner(self, projects, fake_store):
        with pytest.raises(ValidationError):
            projects.create({"title": "Site", "description": "d"}, None)
        assert fake_store.writes == []

    def test_unowned_entity_needs_no_owner(self, fake_store):
        repo = Repository(CONTACT_MESSAGE, fake_store, FakeTime())
        message = repo.create({"name": "Ann", "email": "a@b.co", "message": "Hi"}, None)
        assert message.read is False


class TestUpdateDelete:
    def test_update_stamps_updated_at(self, fake_store):
        time = FakeTime()
        repo = Repository(PROJECT, fake_store, time)
        owner = uuid4()
        project = repo.create({"title": "Site", "description": "d"}, owner)

        time.now = time.now.replace(year=2025)
        updated = repo.update(project.id, {"featured": True}, owner)

        assert updated.featured is True
        assert updated.updated_at.year == 2025
        assert updated.created_at.year == 2024

    def test_update_missing_row_raises_not_found(self, projects):
        with pytest.raises(NotFoundError):
            projects.update(uuid4(), {"title": "x"}, uuid4())

    def test_delete_reports_success(self, projects):
        owner = uuid4()
        project = projects.create({"title": "Site", "description": "d"}, owner)

        assert projects.delete(project.id, owner) is True
        assert projects.delete(project.id, owner) is False
        assert projects.list() == []
