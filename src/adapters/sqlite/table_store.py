"""
SQLite implementation of TableStorePort.

One connection per call, so every write is atomic at the single-row level.
Row-level policy mirrors the hosted store the site was designed for:
- owner-authored tables: anyone reads; only an existing account may write,
  and only rows whose user_id is that account
- contact_messages: anyone inserts; only an existing account reads, updates
  or deletes
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from src.core.ports.changes import ChangePublisherPort
from src.core.ports.store import OrderBy, Row
from src.domain.entities import ChangeEvent, ChangeKind
from src.domain.errors import StoreError
from src.domain.schema import SCHEMAS


def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SQLiteTableStore:
    def __init__(self, db_path: str, publisher: ChangePublisherPort | None = None):
        self.db_path = db_path
        self._publisher = publisher
        self._columns: dict[str, frozenset[str]] = {}

    @contextmanager
    def _connect(self, table: str) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open store: {e}", table=table) from e
        conn.row_factory = dict_factory
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Store operation on {table} failed: {e}", table=table) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # --- Validation helpers ---

    def _check_table(self, table: str) -> None:
        if table not in SCHEMAS:
            raise StoreError(f"Unknown table: {table}", table=table)

    def _table_columns(self, conn: sqlite3.Connection, table: str) -> frozenset[str]:
        if table not in self._columns:
            rows = conn.execute(f"PRAGMA table_info({_quote(table)})").fetchall()
            if not rows:
                raise StoreError(f"Table {table} does not exist (run migrations)", table=table)
            self._columns[table] = frozenset(r["name"] for r in rows)
        return self._columns[table]

    def _check_columns(self, conn: sqlite3.Connection, table: str, names: Any) -> None:
        known = self._table_columns(conn, table)
        unknown = sorted(n for n in names if n not in known)
        if unknown:
            raise StoreError(f"Unknown column(s) for {table}: {', '.join(unknown)}", table=table)

    # --- Row-level policy ---

    def _is_account(self, conn: sqlite3.Connection, actor_id: UUID | None) -> bool:
        if actor_id is None:
            return False
        row = conn.execute("SELECT 1 AS ok FROM accounts WHERE id = ?", (str(actor_id),)).fetchone()
        return row is not None

    def _deny(self, table: str, action: str) -> StoreError:
        return StoreError(
            f"Permission denied: {action} on {table}", table=table, permission_denied=True
        )

    def _authorize_read(self, conn: sqlite3.Connection, table: str, actor_id: UUID | None) -> None:
        if not SCHEMAS[table].owned and not self._is_account(conn, actor_id):
            raise self._deny(table, "select")

    def _authorize_insert(
        self, conn: sqlite3.Connection, table: str, row: Row, actor_id: UUID | None
    ) -> None:
        if not SCHEMAS[table].owned:
            return
        if not self._is_account(conn, actor_id) or row.get("user_id") != str(actor_id):
            raise self._deny(table, "insert")

    def _authorize_write(
        self,
        conn: sqlite3.Connection,
        table: str,
        existing: Row,
        actor_id: UUID | None,
        action: str,
    ) -> None:
        if not self._is_account(conn, actor_id):
            raise self._deny(table, action)
        if SCHEMAS[table].owned and existing.get("user_id") != str(actor_id):
            raise self._deny(table, action)

    def _publish(self, table: str, kind: ChangeKind, row_id: str) -> None:
        if self._publisher is not None:
            self._publisher.publish(ChangeEvent(table=table, kind=kind, row_id=row_id))

    # --- TableStorePort ---

    def select(
        self,
        table: str,
        *,
        order: OrderBy = (),
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        actor_id: UUID | None = None,
    ) -> list[Row]:
        self._check_table(table)
        filters = filters or {}
        with self._connect(table) as conn:
            self._check_columns(conn, table, [*filters, *(col for col, _ in order)])
            self._authorize_read(conn, table, actor_id)

            query = f"SELECT * FROM {_quote(table)}"
            params: list[Any] = []
            if filters:
                clauses = []
                for col, value in filters.items():
                    if value is None:
                        clauses.append(f"{_quote(col)} IS NULL")
                    else:
                        clauses.append(f"{_quote(col)} = ?")
                        params.append(str(value) if isinstance(value, UUID) else value)
                query += " WHERE " + " AND ".join(clauses)
            if order:
                query += " ORDER BY " + ", ".join(
                    f"{_quote(col)} {'ASC' if asc else 'DESC'}" for col, asc in order
                )
                # rowid preserves insertion order for identical sort keys
                query += ", rowid ASC"
            if limit is not None:
                query += " LIMIT ?"
                params.append(int(limit))

            return conn.execute(query, params).fetchall()

    def insert(self, table: str, row: Row, *, actor_id: UUID | None = None) -> Row:
        self._check_table(table)
        with self._connect(table) as conn:
            self._check_columns(conn, table, row)
            self._authorize_insert(conn, table, row, actor_id)

            cols = list(row)
            conn.execute(
                f"INSERT INTO {_quote(table)} ({', '.join(_quote(c) for c in cols)}) "
                f"VALUES ({', '.join('?' for _ in cols)})",
                [row[c] for c in cols],
            )
            stored = conn.execute(
                f"SELECT * FROM {_quote(table)} WHERE id = ?", (row["id"],)
            ).fetchone()
        self._publish(table, "insert", str(row["id"]))
        return stored

    def update(
        self, table: str, row_id: str, fields: Row, *, actor_id: UUID | None = None
    ) -> Row | None:
        self._check_table(table)
        with self._connect(table) as conn:
            self._check_columns(conn, table, fields)
            existing = conn.execute(
                f"SELECT * FROM {_quote(table)} WHERE id = ?", (row_id,)
            ).fetchone()
            if existing is None:
                return None
            self._authorize_write(conn, table, existing, actor_id, "update")

            if fields:
                assignments = ", ".join(f"{_quote(c)} = ?" for c in fields)
                conn.execute(
                    f"UPDATE {_quote(table)} SET {assignments} WHERE id = ?",
                    [*fields.values(), row_id],
                )
            stored = conn.execute(
                f"SELECT * FROM {_quote(table)} WHERE id = ?", (row_id,)
            ).fetchone()
        self._publish(table, "update", row_id)
        return stored

    def delete(self, table: str, row_id: str, *, actor_id: UUID | None = None) -> bool:
        self._check_table(table)
        with self._connect(table) as conn:
            existing = conn.execute(
                f"SELECT * FROM {_quote(table)} WHERE id = ?", (row_id,)
            ).fetchone()
            if existing is None:
                return False
            self._authorize_write(conn, table, existing, actor_id, "delete")
            conn.execute(f"DELETE FROM {_quote(table)} WHERE id = ?", (row_id,))
        self._publish(table, "delete", row_id)
        return True
