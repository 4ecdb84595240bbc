"""A :class:`~fluentql.execute.base.Database` backed by a SQLAlchemy engine.

Install the optional dependency before using this module::

    pip install "fluentql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from fluentql import Query
    from fluentql.execute.engine import SQLAlchemyDatabase

    db = SQLAlchemyDatabase(create_engine("sqlite:///app.db"))
    users = await Query("users", database=db).where("active", True).get()

Statements are sent with ``Connection.exec_driver_sql`` so the ``?``
placeholders reach the DBAPI driver untouched; the engine must use a
qmark-paramstyle driver such as :mod:`sqlite3`. Blocking calls run in a
worker thread via :func:`asyncio.to_thread`.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from fluentql.errors import DatabaseExecutionError
from fluentql.execute.base import Database, Row

try:
    from sqlalchemy.exc import SQLAlchemyError
except ImportError as exc:
    raise ImportError(
        "SQLAlchemy is required for fluentql.execute.engine. "
        'Install it with: pip install "fluentql[sqlalchemy]"'
    ) from exc

if TYPE_CHECKING:
    from sqlalchemy import CursorResult, Engine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLAlchemyDatabase(Database):
    """Runs statements on a synchronous SQLAlchemy :class:`Engine`.

    Every call opens a connection inside ``engine.begin()``, so each write
    is committed on success and rolled back on failure.

    Args:
        engine: Engine whose driver accepts ``?`` placeholders.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # ------------------------------------------------------------------
    # Database interface
    # ------------------------------------------------------------------

    async def fetch_all(self, sql: str, bindings: Sequence[Any]) -> list[Row]:
        return await self._run(sql, bindings, lambda r: [dict(m) for m in r.mappings()])

    async def insert(
        self,
        sql: str,
        bindings: Sequence[Any],
        returning_id: bool = False,
    ) -> int | None:
        if returning_id:
            return await self._run(sql, bindings, lambda r: r.lastrowid)
        return await self._run(sql, bindings, lambda r: r.rowcount)

    async def update_or_delete(self, sql: str, bindings: Sequence[Any]) -> int:
        return await self._run(sql, bindings, lambda r: r.rowcount)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run(
        self,
        sql: str,
        bindings: Sequence[Any],
        handle: Callable[[CursorResult[Any]], T],
    ) -> T:
        return await asyncio.to_thread(self._execute, sql, tuple(bindings), handle)

    def _execute(
        self,
        sql: str,
        bindings: tuple[Any, ...],
        handle: Callable[[CursorResult[Any]], T],
    ) -> T:
        try:
            with self._engine.begin() as conn:
                result = conn.exec_driver_sql(sql, bindings or None)
                return handle(result)
        except SQLAlchemyError as exc:
            logger.error("Statement failed: %s", sql)
            raise DatabaseExecutionError(
                f"Statement failed: {exc}", sql=sql, bindings=bindings
            ) from exc
