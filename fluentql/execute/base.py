"""The database collaborator interface used by the query facade.

The facade never talks to a database itself. It renders a parameterized
statement and hands ``(sql, bindings)`` to a :class:`Database`, which runs
it and returns rows, an identifier, or an affected-row count.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

#: One result row keyed by column name.
Row = dict[str, Any]


class Database(ABC):
    """Abstract asynchronous executor for qmark-style statements.

    Subclasses implement the four execution methods. Cancellation, retries
    and timeouts are the subclass's business.
    """

    @abstractmethod
    async def fetch_all(self, sql: str, bindings: Sequence[Any]) -> list[Row]:
        """Run a SELECT and return every row.

        Args:
            sql: Statement with ``?`` placeholders.
            bindings: Values aligned with the placeholders.

        Returns:
            Rows as dicts keyed by column name.
        """

    async def fetch_one(self, sql: str, bindings: Sequence[Any]) -> Row | None:
        """Run a SELECT and return the first row, or ``None``."""
        rows = await self.fetch_all(sql, bindings)
        return rows[0] if rows else None

    @abstractmethod
    async def insert(
        self,
        sql: str,
        bindings: Sequence[Any],
        returning_id: bool = False,
    ) -> int | None:
        """Run an INSERT.

        Returns:
            The new row's identifier when *returning_id* is set, else the
            number of inserted rows.
        """

    @abstractmethod
    async def update_or_delete(self, sql: str, bindings: Sequence[Any]) -> int:
        """Run an UPDATE or DELETE and return the affected-row count."""
