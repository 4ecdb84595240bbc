"""Statements that wrap a complete query as a subquery.

:class:`Aggregate` turns a query into a single-row aggregate over a derived
table; :class:`Exists` turns it into ``SELECT EXISTS(...)``. Neither adds
bindings of its own beyond those of a raw aggregate column: the base query's
bindings are passed through unchanged and in order.
"""
from __future__ import annotations

from fluentql.compile.base import PreparedStatement, Renderable
from fluentql.compile.fragment import Fragment
from fluentql.compile.families import exists
from fluentql.errors import MissingRequiredArgument
from fluentql.schema.column_reference import ColumnReference, quote_segment
from fluentql.schema.expressions import AggregateMethod, Connector

#: Column sentinel that COUNT accepts in place of a column name.
WILDCARD = "*"


class Aggregate(Renderable):
    """``SELECT METHOD(alias.col) AS result FROM (<base>) AS alias``.

    The base query is rendered each time this wrapper is rendered; callers
    that keep mutating the base should pass a clone.

    Args:
        base: The query to aggregate over.
        method: Aggregate function name or :class:`AggregateMethod`.
        column: Column name, raw fragment, or ``None`` / ``"*"`` (COUNT only).
        table_alias: Alias of the derived table.
        column_alias: Alias of the result column.

    Raises:
        MissingRequiredArgument: If a non-COUNT aggregate has no column.
        ValueError: If *method* is not an aggregate function.
    """

    def __init__(
        self,
        base: Renderable,
        method: AggregateMethod | str,
        column: str | Fragment | None = None,
        *,
        table_alias: str = "temp_table",
        column_alias: str = "aggregate",
    ) -> None:
        self.method = AggregateMethod(method.upper() if isinstance(method, str) else method)
        if (column is None or column == WILDCARD) and self.method is not AggregateMethod.COUNT:
            raise MissingRequiredArgument(
                type(self).__name__, self.method.value.lower(), "column"
            )
        self.base = base
        self.column = column
        self.table_alias = table_alias
        self.column_alias = column_alias

    def _target(self) -> PreparedStatement:
        if self.column is None or self.column == WILDCARD:
            return PreparedStatement(WILDCARD)
        if isinstance(self.column, Fragment):
            return self.column.prepare()
        # The derived table exposes bare column names only.
        name = ColumnReference.parse(self.column).column
        return PreparedStatement(f"{self.table_alias}.{quote_segment(name)}")

    def prepare(self, leading: bool = False) -> PreparedStatement:
        target = self._target()
        sub = self.base.prepare()
        return PreparedStatement(
            f"SELECT {self.method.value}({target.sql}) AS {self.column_alias} "
            f"FROM ({sub.sql}) AS {self.table_alias}",
            target.bindings + sub.bindings,
        )


class Exists(Renderable):
    """``SELECT EXISTS(<base>)``."""

    def __init__(self, base: Renderable) -> None:
        self.base = base

    def prepare(self, leading: bool = False) -> PreparedStatement:
        sub = self.base.prepare()
        return PreparedStatement(f"SELECT EXISTS({sub.sql})", sub.bindings)

    def as_predicate(
        self,
        connector: Connector = Connector.AND,
        negated: bool = False,
    ) -> Fragment:
        """The WHERE form, ``EXISTS (<base>)`` or ``NOT EXISTS (<base>)``."""
        return exists(self.base, connector, negated)
