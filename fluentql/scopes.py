"""WHERE and HAVING method sets shared by the query and its group scopes.

:class:`WhereMethods` and :class:`HavingMethods` turn fluent calls into
fragments from :mod:`fluentql.compile.families` and push them into a target
container supplied by the host class. :class:`~fluentql.query.Query` targets
its own clauses; :class:`WhereScope` and :class:`HavingScope` target a
:class:`~fluentql.compile.container.Group`, which is what a group callback
receives::

    query.where("name", "John").or_where(
        lambda q: q.where("age", ">", 20).where_null("deleted_at")
    )
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from fluentql.compile import families
from fluentql.compile.base import Renderable
from fluentql.compile.container import ClauseContainer, Group
from fluentql.compile.fragment import Fragment
from fluentql.compile.wrappers import Exists
from fluentql.errors import MissingRequiredArgument
from fluentql.schema.expressions import Connector, MultiColumnMode

if TYPE_CHECKING:
    from fluentql.query import Query

#: Marks an argument the caller did not pass, so ``0`` and ``""`` stay values.
MISSING: Any = object()

Self = TypeVar("Self", bound="WhereMethods")
HavingSelf = TypeVar("HavingSelf", bound="HavingMethods")

AND, OR = Connector.AND, Connector.OR


def shift_operator(
    caller: str,
    method: str,
    operator: Any,
    value: Any,
) -> tuple[Any, Any]:
    """Resolve ``(column, value)`` calls to ``(column, "=", value)``.

    Raises:
        MissingRequiredArgument: When neither operator nor value was passed.
    """
    if value is not MISSING:
        return operator, value
    if operator is MISSING:
        raise MissingRequiredArgument(caller, method, "value")
    return "=", operator


# ---------------------------------------------------------------------------
# WHERE
# ---------------------------------------------------------------------------


class WhereMethods:
    """The WHERE vocabulary. Hosts implement :meth:`_where_clause`."""

    def _where_clause(self) -> ClauseContainer:
        raise NotImplementedError

    def _push_where(self: Self, entry: Fragment | Group) -> Self:
        self._where_clause().push(entry)
        return self

    def _where(
        self: Self,
        method: str,
        column: Any,
        operator: Any,
        value: Any,
        connector: Connector,
        negated: bool = False,
    ) -> Self:
        if isinstance(column, Fragment):
            return self._push_where(families.raw_predicate(column, None, connector, negated))
        if callable(column):
            group = Group(connector, negated)
            column(WhereScope(group))
            return self._push_where(group)
        operator, value = shift_operator(type(self).__name__, method, operator, value)
        return self._push_where(families.comparison(column, operator, value, connector, negated))

    # ------------------------------------------------------------------
    # Comparisons, groups and raw
    # ------------------------------------------------------------------

    def where(self: Self, column: Any, operator: Any = MISSING, value: Any = MISSING) -> Self:
        """Add an AND comparison, a raw fragment, or a callback group.

        Args:
            column: Column name, :class:`Fragment` from ``Query.raw``, or a
                callable receiving a :class:`WhereScope` that fills a
                parenthesized group.
            operator: Comparison operator, or the value when *value* is
                omitted (the operator then defaults to ``=``).
            value: Value to compare against.

        Raises:
            InvalidComparisonOperatorError: If *operator* is not whitelisted.
        """
        return self._where("where", column, operator, value, AND)

    def or_where(self: Self, column: Any, operator: Any = MISSING, value: Any = MISSING) -> Self:
        return self._where("or_where", column, operator, value, OR)

    def where_not(self: Self, column: Any, operator: Any = MISSING, value: Any = MISSING) -> Self:
        return self._where("where_not", column, operator, value, AND, negated=True)

    def or_where_not(
        self: Self, column: Any, operator: Any = MISSING, value: Any = MISSING
    ) -> Self:
        return self._where("or_where_not", column, operator, value, OR, negated=True)

    def where_raw(self: Self, sql: str, bindings: Iterable[Any] | None = None) -> Self:
        return self._push_where(families.raw_predicate(sql, bindings, AND))

    def or_where_raw(self: Self, sql: str, bindings: Iterable[Any] | None = None) -> Self:
        return self._push_where(families.raw_predicate(sql, bindings, OR))

    def where_column(
        self: Self, first: str, operator: Any, second: Any = MISSING
    ) -> Self:
        """Compare two columns: ``where_column("created_at", "updated_at")``."""
        operator, second = shift_operator(type(self).__name__, "where_column", operator, second)
        return self._push_where(families.column_comparison(first, operator, second, AND))

    def or_where_column(
        self: Self, first: str, operator: Any, second: Any = MISSING
    ) -> Self:
        operator, second = shift_operator(type(self).__name__, "or_where_column", operator, second)
        return self._push_where(families.column_comparison(first, operator, second, OR))

    # ------------------------------------------------------------------
    # NULL
    # ------------------------------------------------------------------

    def where_null(self: Self, column: str) -> Self:
        return self._push_where(families.null_check(column, AND))

    def or_where_null(self: Self, column: str) -> Self:
        return self._push_where(families.null_check(column, OR))

    def where_not_null(self: Self, column: str) -> Self:
        return self._push_where(families.null_check(column, AND, negated=True))

    def or_where_not_null(self: Self, column: str) -> Self:
        return self._push_where(families.null_check(column, OR, negated=True))

    # ------------------------------------------------------------------
    # IN
    # ------------------------------------------------------------------

    def where_in(self: Self, column: str, values: Iterable[Any]) -> Self:
        return self._push_where(families.membership(column, values, AND))

    def or_where_in(self: Self, column: str, values: Iterable[Any]) -> Self:
        return self._push_where(families.membership(column, values, OR))

    def where_not_in(self: Self, column: str, values: Iterable[Any]) -> Self:
        return self._push_where(families.membership(column, values, AND, negated=True))

    def or_where_not_in(self: Self, column: str, values: Iterable[Any]) -> Self:
        return self._push_where(families.membership(column, values, OR, negated=True))

    # ------------------------------------------------------------------
    # BETWEEN
    # ------------------------------------------------------------------

    def where_between(self: Self, column: str, values: Sequence[Any]) -> Self:
        """``column BETWEEN low AND high``.

        Raises:
            InvalidBetweenValueArrayLength: Unless *values* holds two bounds.
        """
        return self._push_where(families.value_range(column, values, AND))

    def or_where_between(self: Self, column: str, values: Sequence[Any]) -> Self:
        return self._push_where(families.value_range(column, values, OR))

    def where_not_between(self: Self, column: str, values: Sequence[Any]) -> Self:
        return self._push_where(families.value_range(column, values, AND, negated=True))

    def or_where_not_between(self: Self, column: str, values: Sequence[Any]) -> Self:
        return self._push_where(families.value_range(column, values, OR, negated=True))

    def where_between_columns(self: Self, column: str, columns: Sequence[str]) -> Self:
        return self._push_where(families.column_range(column, columns, AND))

    def or_where_between_columns(self: Self, column: str, columns: Sequence[str]) -> Self:
        return self._push_where(families.column_range(column, columns, OR))

    def where_not_between_columns(self: Self, column: str, columns: Sequence[str]) -> Self:
        return self._push_where(families.column_range(column, columns, AND, negated=True))

    def or_where_not_between_columns(
        self: Self, column: str, columns: Sequence[str]
    ) -> Self:
        return self._push_where(families.column_range(column, columns, OR, negated=True))

    # ------------------------------------------------------------------
    # Multi-column
    # ------------------------------------------------------------------

    def _where_multi(
        self: Self,
        method: str,
        mode: MultiColumnMode,
        columns: Iterable[str],
        operator: Any,
        value: Any,
    ) -> Self:
        operator, value = shift_operator(type(self).__name__, method, operator, value)
        return self._push_where(families.multi_column(columns, operator, value, mode, AND))

    def where_any(
        self: Self, columns: Iterable[str], operator: Any, value: Any = MISSING
    ) -> Self:
        """``AND (`a` op ? OR `b` op ? ...)``."""
        return self._where_multi("where_any", MultiColumnMode.ANY, columns, operator, value)

    def where_all(
        self: Self, columns: Iterable[str], operator: Any, value: Any = MISSING
    ) -> Self:
        """``AND (`a` op ? AND `b` op ? ...)``."""
        return self._where_multi("where_all", MultiColumnMode.ALL, columns, operator, value)

    def where_none(
        self: Self, columns: Iterable[str], operator: Any, value: Any = MISSING
    ) -> Self:
        """``AND NOT (`a` op ? OR `b` op ? ...)``."""
        return self._where_multi("where_none", MultiColumnMode.NONE, columns, operator, value)

    # ------------------------------------------------------------------
    # EXISTS
    # ------------------------------------------------------------------

    def _where_exists(
        self: Self,
        query: Query | Callable[[Query], Query | None],
        connector: Connector,
        negated: bool,
    ) -> Self:
        if not isinstance(query, Renderable):
            from fluentql.query import Query  # avoid circular import

            sub = Query()
            query = query(sub) or sub
        return self._push_where(Exists(query).as_predicate(connector, negated))

    def where_exists(self: Self, query: Query | Callable[[Query], Query | None]) -> Self:
        """Add ``EXISTS (<query>)``.

        Args:
            query: A query, or a callable that configures the fresh query it
                receives (returning it is optional).
        """
        return self._where_exists(query, AND, False)

    def or_where_exists(self: Self, query: Query | Callable[[Query], Query | None]) -> Self:
        return self._where_exists(query, OR, False)

    def where_not_exists(self: Self, query: Query | Callable[[Query], Query | None]) -> Self:
        return self._where_exists(query, AND, True)

    def or_where_not_exists(
        self: Self, query: Query | Callable[[Query], Query | None]
    ) -> Self:
        return self._where_exists(query, OR, True)


# ---------------------------------------------------------------------------
# HAVING
# ---------------------------------------------------------------------------


class HavingMethods:
    """The HAVING vocabulary. Hosts implement :meth:`_having_clause`."""

    def _having_clause(self) -> ClauseContainer:
        raise NotImplementedError

    def _push_having(self: HavingSelf, entry: Fragment | Group) -> HavingSelf:
        self._having_clause().push(entry)
        return self

    def _having(
        self: HavingSelf,
        method: str,
        column: Any,
        operator: Any,
        value: Any,
        connector: Connector,
    ) -> HavingSelf:
        if isinstance(column, Fragment):
            return self._push_having(families.raw_predicate(column, None, connector))
        if callable(column):
            group = Group(connector)
            column(HavingScope(group))
            return self._push_having(group)
        operator, value = shift_operator(type(self).__name__, method, operator, value)
        return self._push_having(families.comparison(column, operator, value, connector))

    def having(
        self: HavingSelf, column: Any, operator: Any = MISSING, value: Any = MISSING
    ) -> HavingSelf:
        """Add an AND condition to HAVING; accepts the same shapes as ``where``."""
        return self._having("having", column, operator, value, AND)

    def or_having(
        self: HavingSelf, column: Any, operator: Any = MISSING, value: Any = MISSING
    ) -> HavingSelf:
        return self._having("or_having", column, operator, value, OR)

    def having_raw(self: HavingSelf, sql: str, bindings: Iterable[Any] | None = None) -> HavingSelf:
        return self._push_having(families.raw_predicate(sql, bindings, AND))

    def or_having_raw(
        self: HavingSelf, sql: str, bindings: Iterable[Any] | None = None
    ) -> HavingSelf:
        return self._push_having(families.raw_predicate(sql, bindings, OR))

    def having_between(self: HavingSelf, column: str, values: Sequence[Any]) -> HavingSelf:
        return self._push_having(families.value_range(column, values, AND))

    def or_having_between(self: HavingSelf, column: str, values: Sequence[Any]) -> HavingSelf:
        return self._push_having(families.value_range(column, values, OR))


# ---------------------------------------------------------------------------
# Group scopes handed to callbacks
# ---------------------------------------------------------------------------


class WhereScope(WhereMethods):
    """Fills a WHERE group; nested callbacks open nested groups."""

    def __init__(self, group: Group) -> None:
        self._group = group

    def _where_clause(self) -> ClauseContainer:
        return self._group


class HavingScope(HavingMethods):
    """Fills a HAVING group."""

    def __init__(self, group: Group) -> None:
        self._group = group

    def _having_clause(self) -> ClauseContainer:
        return self._group
