"""SQLite table store: row-level policy, ordering and change events."""

from uuid import uuid4

import pytest

from src.domain.errors import NotFoundError, StoreError, ValidationError
from src.domain.schema import SCHEMAS


class TestRoundTrip:
    def test_technologies_round_trip_as_ordered_list(self, repos, owner_session):
        projects = repos["projects"]
        created = projects.create(
            {"title": "Site", "description": "Portfolio", "technologies": "React, Node.js"},
            owner_session.account_id,
        )

        [read_back] = projects.list()
        assert read_back.id == created.id
        assert read_back.technologies == ["React", "Node.js"]

    def test_current_experience_reads_without_end_date(self, repos, owner_session):
        work = repos["work_experiences"]
        work.create(
            {
                "company": "Acme",
                "title": "Engineer",
                "start_date": "2020-01-01",
                "end_date": "2021-01-01",
                "current": True,
            },
            owner_session.account_id,
        )
        [row] = work.list()
        assert row.current is True
        assert row.end_date is None

    def test_list_orders_by_display_order_then_insertion(self, repos, owner_session):
        skills = repos["skills"]
        for name, order in (("B", 1), ("A", 0), ("C", 1)):
            skills.create(
                {"name": name, "category": "Backend", "display_order": order},
                owner_session.account_id,
            )
        assert [s.name for s in skills.list()] == ["A", "B", "C"]

    def test_profile_pick_is_deterministic(self, repos, owner_session):
        profiles = repos["profiles"]
        profiles.create({"full_name": "Second", "display_order": 1}, owner_session.account_id)
        profiles.create({"full_name": "First", "display_order": 0}, owner_session.account_id)

        assert profiles.get_one().full_name == "First"

    def test_empty_list_and_absent_row(self, repos):
        assert repos["certificates"].list() == []
        assert repos["certificates"].get_one() is None


class TestRowLevelPolicy:
    @pytest.mark.parametrize("table", sorted(t for t, s in SCHEMAS.items() if s.owned))
    def test_insert_requires_existing_account(self, repos, table):
        schema = SCHEMAS[table]
        fields = {
            name: "2020-01-01" if name in schema.date_fields else "x" for name in schema.required
        }
        with pytest.raises(StoreError) as exc:
            repos[table].create(fields, uuid4())
        assert exc.value.permission_denied is True
        assert repos[table].list() == []

    def test_update_by_stranger_leaves_row_unchanged(self, repos, owner_session):
        projects = repos["projects"]
        project = projects.create(
            {"title": "Mine", "description": "d"}, owner_session.account_id
        )

        with pytest.raises(StoreError) as exc:
            projects.update(project.id, {"title": "Hijacked"}, uuid4())

        assert exc.value.permission_denied is True
        assert projects.get_one({"id": str(project.id)}).title == "Mine"

    def test_delete_by_stranger_leaves_row(self, repos, owner_session):
        projects = repos["projects"]
        project = projects.create(
            {"title": "Mine", "description": "d"}, owner_session.account_id
        )

        with pytest.raises(StoreError):
            projects.delete(project.id, uuid4())
        assert projects.get_one({"id": str(project.id)}) is not None

    def test_contact_messages_write_only_for_visitors(self, repos, owner_session):
        messages = repos["contact_messages"]
        messages.create({"name": "Ann", "email": "a@b.co", "message": "Hi"}, None)

        with pytest.raises(StoreError) as exc:
            messages.list()
        assert exc.value.permission_denied is True

        [message] = messages.list(actor_id=owner_session.account_id)
        assert message.read is False
        assert message.subject is None

    def test_owner_marks_message_read(self, repos, owner_session):
        messages = repos["contact_messages"]
        created = messages.create({"name": "Ann", "email": "a@b.co", "message": "Hi"}, None)

        updated = messages.update(created.id, {"read": True}, owner_session.account_id)
        assert updated.read is True

        with pytest.raises(ValidationError):
            messages.update(created.id, {"message": "edited"}, owner_session.account_id)

    def test_update_missing_row(self, repos, owner_session):
        with pytest.raises(NotFoundError):
            repos["projects"].update(uuid4(), {"title": "x"}, owner_session.account_id)


class TestChangeEvents:
    def test_writes_publish_events(self, repos, channel, owner_session):
        events = []
        channel.subscribe("projects", events.append)
        projects = repos["projects"]

        project = projects.create(
            {"title": "A", "description": "d"}, owner_session.account_id
        )
        projects.update(project.id, {"featured": True}, owner_session.account_id)
        projects.delete(project.id, owner_session.account_id)

        assert [e.kind for e in events] == ["insert", "update", "delete"]
        assert all(e.row_id == str(project.id) for e in events)

    def test_rejected_write_publishes_nothing(self, repos, channel):
        events = []
        channel.subscribe("projects", events.append)

        with pytest.raises(StoreError):
            repos["projects"].create({"title": "A", "description": "d"}, uuid4())
        assert events == []


class TestStoreFailures:
    def test_unknown_table(self, store):
        with pytest.raises(StoreError):
            store.select("accounts")

    def test_unmigrated_database(self, tmp_path):
        from src.adapters.sqlite.table_store import SQLiteTableStore

        store = SQLiteTableStore(str(tmp_path / "empty.db"))
        with pytest.raises(StoreError):
            store.select("projects")
