"""Test fixtures: an in-memory Database double and SQLite seed data."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fluentql.execute.base import Database, Row

#: Seed rows for the ``users`` table used by the integration tests.
USERS: list[dict[str, Any]] = [
    {"name": "John", "email": "john@example.com", "age": 34, "active": 1},
    {"name": "James", "email": "james@example.com", "age": 19, "active": 1},
    {"name": "Bob", "email": "bob@sample.org", "age": 52, "active": 0},
    {"name": "Alice", "email": "alice@example.com", "age": 25, "active": 1},
]

USERS_DDL = """
CREATE TABLE users (
    id      INTEGER PRIMARY KEY AUTOINCREMENT,
    name    TEXT NOT NULL,
    email   TEXT,
    age     INTEGER,
    active  INTEGER NOT NULL DEFAULT 1
)
"""


class RecordingDatabase(Database):
    """Records every call and answers with canned results.

    Args:
        rows: Rows returned by every fetch.
        last_id: Identifier returned by ``insert(returning_id=True)``.
        affected: Count returned by inserts, updates and deletes.
    """

    def __init__(
        self,
        rows: list[Row] | None = None,
        last_id: int = 1,
        affected: int = 1,
    ) -> None:
        self.rows = rows or []
        self.last_id = last_id
        self.affected = affected
        self.calls: list[tuple[Any, ...]] = []

    @property
    def last_call(self) -> tuple[Any, ...]:
        return self.calls[-1]

    async def fetch_all(self, sql: str, bindings: Sequence[Any]) -> list[Row]:
        self.calls.append(("fetch_all", sql, tuple(bindings)))
        return list(self.rows)

    async def insert(
        self,
        sql: str,
        bindings: Sequence[Any],
        returning_id: bool = False,
    ) -> int | None:
        self.calls.append(("insert", sql, tuple(bindings), returning_id))
        return self.last_id if returning_id else self.affected

    async def update_or_delete(self, sql: str, bindings: Sequence[Any]) -> int:
        self.calls.append(("update_or_delete", sql, tuple(bindings)))
        return self.affected
