from datetime import UTC, datetime

import pytest

from src.adapters.auth.crypto import TokenSigner
from src.adapters.auth.local_auth import LocalAuthService
from src.adapters.changes import InMemoryChangeChannel
from src.adapters.clock import SystemClock
from src.adapters.dev_email import DevEmailAdapter
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.table_store import SQLiteTableStore
from src.components.repository import Repository
from src.domain import schema

OWNER_EMAIL = "owner@example.com"
OWNER_PASSWORD = "correct-horse-battery"


class FakeTime:
    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self.now


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def db_path(tmp_path):
    """A migrated, empty SQLite database."""
    path = str(tmp_path / "folio.db")
    SQLiteMigrator(path).run_migrations()
    return path


@pytest.fixture
def channel():
    return InMemoryChangeChannel()


@pytest.fixture
def store(db_path, channel):
    return SQLiteTableStore(db_path, publisher=channel)


@pytest.fixture
def email_adapter():
    return DevEmailAdapter()


@pytest.fixture
def auth(db_path, email_adapter):
    # Real clock: token expiry is checked against wall time when decoding
    return LocalAuthService(
        db_path,
        signer=TokenSigner("test-secret"),
        time=SystemClock(),
        email=email_adapter,
    )


@pytest.fixture
def owner_session(auth):
    return auth.sign_up(OWNER_EMAIL, OWNER_PASSWORD)


@pytest.fixture
def repos(store, fake_time):
    return {table: Repository(s, store, fake_time) for table, s in schema.SCHEMAS.items()}
