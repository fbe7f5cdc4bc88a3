import sqlite3

import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.domain.schema import SCHEMAS


@pytest.fixture
def temp_db_path(tmp_path):
    return str(tmp_path / "nested" / "test_db.sqlite")


def table_names(db_path):
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    finally:
        conn.close()
    return {r[0] for r in rows}


def test_migrator_creates_every_entity_table(temp_db_path):
    applied = SQLiteMigrator(temp_db_path).run_migrations()

    assert applied == ["0001_portfolio.sql"]
    tables = table_names(temp_db_path)
    assert {"_migrations", "accounts"} <= tables
    assert set(SCHEMAS) <= tables


def test_migrator_is_idempotent(temp_db_path):
    migrator = SQLiteMigrator(temp_db_path)
    migrator.run_migrations()

    assert migrator.run_migrations() == []


def test_columns_match_entity_models(temp_db_path):
    SQLiteMigrator(temp_db_path).run_migrations()
    conn = sqlite3.connect(temp_db_path)
    try:
        for table, schema in SCHEMAS.items():
            cols = {r[1] for r in conn.execute(f'PRAGMA table_info("{table}")')}
            assert set(schema.model.model_fields) <= cols, table
    finally:
        conn.close()
