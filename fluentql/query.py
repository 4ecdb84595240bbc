"""The fluent query facade.

A :class:`Query` owns one :class:`ClauseContainer` per clause, exposes the
fluent building methods, assembles SELECT / INSERT / UPDATE / DELETE
statements in fixed clause order, and runs them through a
:class:`~fluentql.execute.base.Database`::

    query = (
        Query("users", database=db)
        .select("id", "name")
        .where("age", ">", 20)
        .or_where(lambda q: q.where_null("deleted_at").where("role", "admin"))
        .order_by("name")
        .limit(10)
    )

    query.to_sql()      # literal SQL, for display and logging
    query.prepare()     # PreparedStatement(sql, bindings)
    await query.get()   # rows from the database

Building methods mutate and return the query; use :meth:`Query.clone` to
branch. Terminal operations never mutate the query they run on.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import TypeAdapter

from fluentql.compile import clauses
from fluentql.compile.base import PreparedStatement, Renderable
from fluentql.compile.container import ClauseContainer
from fluentql.compile.fragment import Fragment, raw
from fluentql.compile.render import render_identifier
from fluentql.compile.wrappers import Aggregate, Exists
from fluentql.errors import ConfigurationError, MissingRequiredArgument, TableNotSetError
from fluentql.execute.base import Database, Row
from fluentql.schema.config import QueryConfig
from fluentql.schema.expressions import (
    QUERY_CLAUSES,
    AggregateMethod,
    ClauseKind,
    Connector,
    JoinType,
)
from fluentql.scopes import MISSING, HavingMethods, WhereMethods, shift_operator

logger = logging.getLogger(__name__)


def _flatten(columns: Iterable[Any]) -> list[Any]:
    flat: list[Any] = []
    for column in columns:
        if isinstance(column, (list, tuple)):
            flat.extend(column)
        else:
            flat.append(column)
    return flat


class Query(WhereMethods, HavingMethods, Renderable):
    """Fluent builder for a single statement.

    Args:
        table: Table the statement targets; may be set later with
            :meth:`from_table`.
        alias: Optional table alias.
        database: Collaborator used by the async terminal methods.
        config: Aggregate aliases and defaults; shared with clones.
    """

    def __init__(
        self,
        table: str | None = None,
        alias: str | None = None,
        *,
        database: Database | None = None,
        config: QueryConfig | None = None,
    ) -> None:
        self._clauses: dict[ClauseKind, ClauseContainer] = {
            kind: ClauseContainer(kind) for kind in QUERY_CLAUSES
        }
        self._table: str | None = None
        self._alias: str | None = None
        self._database = database
        self._model: Any = None
        self.config = config or QueryConfig()
        if table is not None:
            self.from_table(table, alias)

    @staticmethod
    def raw(sql: str, bindings: Iterable[Any] | None = None) -> Fragment:
        """Return a raw fragment emitted verbatim wherever it is used.

        Raw SQL is never escaped; do not build it from untrusted input.
        """
        return raw(sql, bindings)

    @property
    def table(self) -> str | None:
        return self._table

    # ------------------------------------------------------------------
    # Container hooks for the where / having mixins
    # ------------------------------------------------------------------

    def _where_clause(self) -> ClauseContainer:
        return self._clauses[ClauseKind.WHERE]

    def _having_clause(self) -> ClauseContainer:
        return self._clauses[ClauseKind.HAVING]

    def clause(self, kind: ClauseKind | str) -> ClauseContainer:
        """Return the container for *kind* (read it, do not push into it)."""
        return self._clauses[self._clause_kind(kind)]

    # ------------------------------------------------------------------
    # FROM / SELECT
    # ------------------------------------------------------------------

    def from_table(self, table: str, alias: str | None = None) -> Query:
        """Set (or replace) the target table."""
        self._table, self._alias = table, alias
        self._clauses[ClauseKind.FROM] = ClauseContainer(ClauseKind.FROM).push(
            clauses.from_table(table, alias)
        )
        return self

    def select(self, *columns: str | Fragment | Iterable[str]) -> Query:
        """Add columns to the select list; lists are flattened.

        ``"name AS n"`` aliases a column and :meth:`raw` fragments are kept
        verbatim.
        """
        container = self._clauses[ClauseKind.SELECT]
        for column in _flatten(columns):
            container.push(clauses.select_column(column))
        return self

    def select_raw(self, sql: str, bindings: Iterable[Any] | None = None) -> Query:
        self._clauses[ClauseKind.SELECT].push(clauses.select_column(raw(sql, bindings)))
        return self

    def distinct(self) -> Query:
        self._clauses[ClauseKind.SELECT].set_distinct()
        return self

    # ------------------------------------------------------------------
    # JOIN
    # ------------------------------------------------------------------

    def _join(
        self,
        join_type: JoinType,
        method: str,
        table: str,
        first: str,
        operator: Any,
        second: Any,
    ) -> Query:
        operator, second = shift_operator(type(self).__name__, method, operator, second)
        self._clauses[ClauseKind.JOIN].push(
            clauses.join(join_type, table, first, operator, second)
        )
        return self

    def join(self, table: str, first: str, operator: Any, second: Any = MISSING) -> Query:
        """``INNER JOIN table ON first op second``; *operator* may be omitted."""
        return self._join(JoinType.INNER, "join", table, first, operator, second)

    def left_join(
        self, table: str, first: str, operator: Any, second: Any = MISSING
    ) -> Query:
        return self._join(JoinType.LEFT, "left_join", table, first, operator, second)

    def cross_join(self, table: str) -> Query:
        self._clauses[ClauseKind.JOIN].push(clauses.cross_join(table))
        return self

    # ------------------------------------------------------------------
    # GROUP BY / ORDER BY / LIMIT / OFFSET
    # ------------------------------------------------------------------

    def group_by(self, *columns: str | Fragment | Iterable[str]) -> Query:
        container = self._clauses[ClauseKind.GROUP_BY]
        for column in _flatten(columns):
            container.push(clauses.group_column(column))
        return self

    def group_by_raw(self, sql: str, bindings: Iterable[Any] | None = None) -> Query:
        self._clauses[ClauseKind.GROUP_BY].push(clauses.group_column(raw(sql, bindings)))
        return self

    def order_by(self, column: str | Fragment, direction: str = "ASC") -> Query:
        """Append an ORDER BY entry.

        Raises:
            InvalidSortDirectionError: Unless *direction* is ASC or DESC.
        """
        self._clauses[ClauseKind.ORDER_BY].push(clauses.order_column(column, direction))
        return self

    def order_by_desc(self, column: str | Fragment) -> Query:
        return self.order_by(column, "DESC")

    def order_by_raw(self, sql: str, bindings: Iterable[Any] | None = None) -> Query:
        fragment = raw(sql, bindings).with_connector(Connector.COMMA)
        self._clauses[ClauseKind.ORDER_BY].push(fragment)
        return self

    def limit(self, count: int) -> Query:
        """Set LIMIT; the last call wins."""
        self._clauses[ClauseKind.LIMIT].push(clauses.limit(count))
        return self

    def offset(self, count: int) -> Query:
        """Set OFFSET; the last call wins."""
        self._clauses[ClauseKind.OFFSET].push(clauses.offset(count))
        return self

    # ------------------------------------------------------------------
    # Control flow
    # ------------------------------------------------------------------

    def when(
        self,
        condition: Any,
        callback: Callable[[Query, Any], Any],
        default: Callable[[Query, Any], Any] | None = None,
    ) -> Query:
        """Apply *callback* only if *condition* holds, else *default*.

        Args:
            condition: A value tested with :func:`bool`, or a zero-argument
                callable whose result is tested.
            callback: Called as ``callback(query, value)`` when true.
            default: Called as ``default(query, value)`` when false.
        """
        value = condition() if callable(condition) else condition
        if value:
            callback(self, value)
        elif default is not None:
            default(self, value)
        return self

    def cast_result_to(self, model: Any) -> Query:
        """Validate rows from :meth:`get`, :meth:`first` and :meth:`find` into
        *model* (a pydantic model, dataclass or TypedDict)."""
        self._model = model
        return self

    # ------------------------------------------------------------------
    # Cloning
    # ------------------------------------------------------------------

    def clone(self) -> Query:
        """Return an independent deep copy of this query."""
        return self._copy(frozenset())

    def clone_without(self, *names: ClauseKind | str) -> Query:
        """Deep copy with the named clauses reset to empty containers.

        Args:
            names: Clause names: ``select``, ``from``, ``join``, ``where``,
                ``group_by``, ``having``, ``order_by``, ``limit``, ``offset``.

        Raises:
            ConfigurationError: For an unknown clause name.
        """
        return self._copy(frozenset(self._clause_kind(name) for name in names))

    def _copy(self, without: frozenset[ClauseKind]) -> Query:
        copy = type(self)(database=self._database, config=self.config)
        copy._model = self._model
        if ClauseKind.FROM not in without:
            copy._table, copy._alias = self._table, self._alias
        copy._clauses = {
            kind: ClauseContainer(kind) if kind in without else container.clone()
            for kind, container in self._clauses.items()
        }
        return copy

    @staticmethod
    def _clause_kind(name: ClauseKind | str) -> ClauseKind:
        try:
            kind = ClauseKind(name)
        except ValueError:
            kind = None
        if kind is None or kind not in QUERY_CLAUSES:
            raise ConfigurationError(
                f"Unknown clause '{name}'. Expected one of: "
                f"{', '.join(k.value for k in QUERY_CLAUSES)}.",
                option="clause",
            )
        return kind

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _require_table(self) -> str:
        if self._table is None:
            raise TableNotSetError(type(self).__name__)
        return self._table

    @staticmethod
    def _assemble(*parts: PreparedStatement) -> PreparedStatement:
        present = [part for part in parts if part]
        return PreparedStatement(
            " ".join(part.sql for part in present),
            tuple(b for part in present for b in part.bindings),
        )

    def prepare(self, leading: bool = False) -> PreparedStatement:
        """Render the SELECT statement as parameterized SQL.

        Raises:
            TableNotSetError: If no table was set.
        """
        self._require_table()
        return self._assemble(*(self._clauses[kind].prepare() for kind in QUERY_CLAUSES))

    def prepare_insert(self, values: Mapping[str, Any]) -> PreparedStatement:
        """``INSERT INTO `table` (`a`, `b`) VALUES (?, ?)``.

        Raises:
            TableNotSetError: If no table was set.
            MissingRequiredArgument: If *values* is empty.
        """
        table = self._require_table()
        if not values:
            raise MissingRequiredArgument(type(self).__name__, "insert", "values")
        return self._assemble(
            PreparedStatement(f"INSERT INTO {render_identifier(table)}"),
            clauses.insert_values(values).prepare(),
        )

    def prepare_update(self, values: Mapping[str, Any]) -> PreparedStatement:
        """``UPDATE `table` SET ... WHERE ... ORDER BY ... LIMIT ?``.

        OFFSET is not part of an UPDATE and is left out.
        """
        self._require_table()
        if not values:
            raise MissingRequiredArgument(type(self).__name__, "update", "values")
        return self._assemble(
            PreparedStatement("UPDATE"),
            self._clauses[ClauseKind.FROM].prepare_body(),
            clauses.assignments(values).prepare(),
            *self._write_filters(),
        )

    def prepare_delete(self) -> PreparedStatement:
        """``DELETE FROM `table` WHERE ... ORDER BY ... LIMIT ?``."""
        self._require_table()
        return self._assemble(
            PreparedStatement("DELETE FROM"),
            self._clauses[ClauseKind.FROM].prepare_body(),
            *self._write_filters(),
        )

    def _write_filters(self) -> tuple[PreparedStatement, ...]:
        return tuple(
            self._clauses[kind].prepare()
            for kind in (ClauseKind.WHERE, ClauseKind.ORDER_BY, ClauseKind.LIMIT)
        )

    def insert_sql(self, values: Mapping[str, Any]) -> str:
        return self.prepare_insert(values).to_sql()

    def update_sql(self, values: Mapping[str, Any]) -> str:
        return self.prepare_update(values).to_sql()

    def delete_sql(self) -> str:
        return self.prepare_delete().to_sql()

    def as_aggregate(
        self,
        method: AggregateMethod | str,
        column: str | Fragment | None = None,
    ) -> Aggregate:
        """Wrap a copy of this query in an aggregate statement.

        The select list is dropped unless the query has a HAVING clause or
        DISTINCT, both of which depend on it.

        Raises:
            MissingRequiredArgument: If a non-COUNT aggregate has no column.
        """
        select = self._clauses[ClauseKind.SELECT]
        keep_select = select.distinct or not self._clauses[ClauseKind.HAVING].is_empty()
        base = self.clone() if keep_select else self.clone_without(ClauseKind.SELECT)
        return Aggregate(
            base,
            method,
            column,
            table_alias=self.config.aggregate_table_alias,
            column_alias=self.config.aggregate_column_alias,
        )

    def as_exists(self) -> Exists:
        """Wrap a copy of this query in ``SELECT EXISTS(...)``."""
        return Exists(self.clone())

    def __repr__(self) -> str:
        return f"Query(table={self._table!r})"

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _require_database(self) -> Database:
        if self._database is None:
            raise ConfigurationError(
                "No database configured. Pass database= to Query() to execute it.",
                option="database",
            )
        return self._database

    def _log(self, statement: PreparedStatement) -> None:
        logger.debug(
            "Executing %s with %d binding(s)", statement.sql, len(statement.bindings)
        )

    def _cast(self, rows: list[Row]) -> list[Any]:
        if self._model is None:
            return rows
        return TypeAdapter(list[self._model]).validate_python(rows)

    async def get(self, *columns: str | Fragment) -> list[Any]:
        """Run the SELECT and return every row.

        Args:
            columns: Extra select columns, applied to a copy of the query.
        """
        query = self.clone()
        if columns:
            query.select(*columns)
        statement = query.prepare()
        database = self._require_database()
        self._log(statement)
        return self._cast(await database.fetch_all(statement.sql, statement.bindings))

    async def first(self, *columns: str | Fragment) -> Any | None:
        """Run the SELECT with ``LIMIT 1`` and return the row or ``None``."""
        rows = await self.clone().limit(1).get(*columns)
        return rows[0] if rows else None

    async def find(self, id: Any, *columns: str | Fragment) -> Any | None:
        """Return the row whose ``id`` column equals *id*, or ``None``."""
        return await self.clone().where("id", id).first(*columns)

    async def exists(self) -> bool:
        statement = self.as_exists().prepare()
        database = self._require_database()
        self._log(statement)
        row = await database.fetch_one(statement.sql, statement.bindings)
        return bool(row and next(iter(row.values())))

    async def doesnt_exist(self) -> bool:
        return not await self.exists()

    async def insert(self, values: Mapping[str, Any]) -> int | None:
        """Insert one row and return the inserted-row count."""
        statement = self.prepare_insert(values)
        database = self._require_database()
        self._log(statement)
        return await database.insert(statement.sql, statement.bindings)

    async def insert_get_id(self, values: Mapping[str, Any]) -> int | None:
        """Insert one row and return its generated identifier."""
        statement = self.prepare_insert(values)
        database = self._require_database()
        self._log(statement)
        return await database.insert(statement.sql, statement.bindings, returning_id=True)

    async def update(self, values: Mapping[str, Any]) -> int:
        """Update matching rows and return the affected-row count."""
        statement = self.prepare_update(values)
        database = self._require_database()
        self._log(statement)
        return await database.update_or_delete(statement.sql, statement.bindings)

    async def delete(self) -> int:
        """Delete matching rows and return the affected-row count."""
        statement = self.prepare_delete()
        database = self._require_database()
        self._log(statement)
        return await database.update_or_delete(statement.sql, statement.bindings)

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    async def aggregate(
        self,
        method: AggregateMethod | str,
        column: str | Fragment | None = None,
    ) -> Any:
        """Run an aggregate over this query and return the single value.

        Returns ``config.aggregate_default`` when no row, or a NULL value,
        comes back.
        """
        statement = self.as_aggregate(method, column).prepare()
        database = self._require_database()
        self._log(statement)
        row = await database.fetch_one(statement.sql, statement.bindings)
        value = row.get(self.config.aggregate_column_alias) if row else None
        return self.config.aggregate_default if value is None else value

    async def count(self, column: str | Fragment = "*") -> Any:
        return await self.aggregate(AggregateMethod.COUNT, column)

    async def sum(self, column: str | Fragment) -> Any:
        return await self.aggregate(AggregateMethod.SUM, column)

    async def avg(self, column: str | Fragment) -> Any:
        return await self.aggregate(AggregateMethod.AVG, column)

    average = avg

    async def min(self, column: str | Fragment) -> Any:
        return await self.aggregate(AggregateMethod.MIN, column)

    async def max(self, column: str | Fragment) -> Any:
        return await self.aggregate(AggregateMethod.MAX, column)
