"""Predicate fragment families.

Each function builds one :class:`Fragment` (or a :class:`Group` for the
multi-column families) for a predicate shape used by WHERE and HAVING.
Families validate their arguments when called and contain no composition
logic: where the fragment ends up is decided by the caller.

Negatable shapes take their NOT form from a template table so that, for
example, a negated null check renders ``IS NOT NULL`` rather than
``NOT ... IS NULL``.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from fluentql.compile.base import Renderable
from fluentql.compile.container import Group
from fluentql.compile.fragment import Fragment
from fluentql.compile.render import render_identifier
from fluentql.schema.expressions import PLACEHOLDER, Connector, MultiColumnMode
from fluentql.validate.validator import validate_operator, validate_range, validate_scalar

# ---------------------------------------------------------------------------
# Templates: (positive form, negated form)
# ---------------------------------------------------------------------------

_NULL = ("{col} IS NULL", "{col} IS NOT NULL")
_IN = ("{col} IN ({values})", "{col} NOT IN ({values})")
_BETWEEN = ("{col} BETWEEN {low} AND {high}", "{col} NOT BETWEEN {low} AND {high}")
_EXISTS = ("EXISTS ({sub})", "NOT EXISTS ({sub})")

# An empty IN list matches nothing and an empty NOT IN list matches everything.
_EMPTY_IN = ("0 = 1", "1 = 1")

#: Member connector and NOT flag of the group each multi-column mode builds.
_MULTI_COLUMN: dict[MultiColumnMode, tuple[Connector, bool]] = {
    MultiColumnMode.ANY: (Connector.OR, False),
    MultiColumnMode.ALL: (Connector.AND, False),
    MultiColumnMode.NONE: (Connector.OR, True),
}


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------


def comparison(
    column: str,
    operator: Any,
    value: Any,
    connector: Connector = Connector.AND,
    negated: bool = False,
) -> Fragment:
    """``col op ?``, for example ``age > ?`` with the column quoted.

    Raises:
        InvalidComparisonOperatorError: If *operator* is not whitelisted.
        InvalidComparisonValueError: If *value* is a list; use
            :func:`membership` for those.
    """
    op = validate_operator(operator)
    return Fragment(
        f"{render_identifier(column)} {op} {PLACEHOLDER}",
        (validate_scalar(column, value),),
        connector,
        negated,
    )


def column_comparison(
    first: str,
    operator: Any,
    second: str,
    connector: Connector = Connector.AND,
    negated: bool = False,
) -> Fragment:
    """``col op col``; both sides are identifiers, nothing is bound."""
    op = validate_operator(operator)
    return Fragment(
        f"{render_identifier(first)} {op} {render_identifier(second)}",
        (),
        connector,
        negated,
    )


# ---------------------------------------------------------------------------
# Null, membership and range
# ---------------------------------------------------------------------------


def null_check(
    column: str,
    connector: Connector = Connector.AND,
    negated: bool = False,
) -> Fragment:
    return Fragment(_NULL[negated].format(col=render_identifier(column)), (), connector)


def membership(
    column: str,
    values: Iterable[Any],
    connector: Connector = Connector.AND,
    negated: bool = False,
) -> Fragment:
    """``col IN (?, ?, ...)`` with one placeholder per value.

    Args:
        column: Column to test.
        values: Any iterable; a single string counts as one value.
        connector: Connector used when the fragment is not first.
        negated: Render ``NOT IN``.
    """
    if isinstance(values, (str, bytes)):
        values = [values]
    bound = tuple(values)
    if not bound:
        return Fragment(_EMPTY_IN[negated], (), connector)
    placeholders = ", ".join(PLACEHOLDER for _ in bound)
    return Fragment(
        _IN[negated].format(col=render_identifier(column), values=placeholders),
        bound,
        connector,
    )


def value_range(
    column: str,
    values: Sequence[Any],
    connector: Connector = Connector.AND,
    negated: bool = False,
) -> Fragment:
    """``col BETWEEN ? AND ?``.

    Raises:
        InvalidBetweenValueArrayLength: Unless *values* holds two bounds.
    """
    low, high = validate_range(values)
    sql = _BETWEEN[negated].format(
        col=render_identifier(column), low=PLACEHOLDER, high=PLACEHOLDER
    )
    return Fragment(sql, (low, high), connector)


def column_range(
    column: str,
    columns: Sequence[str],
    connector: Connector = Connector.AND,
    negated: bool = False,
) -> Fragment:
    """``col BETWEEN col_a AND col_b``; the bounds are identifiers."""
    low, high = validate_range(columns)
    sql = _BETWEEN[negated].format(
        col=render_identifier(column),
        low=render_identifier(low),
        high=render_identifier(high),
    )
    return Fragment(sql, (), connector)


# ---------------------------------------------------------------------------
# Raw, multi-column and exists
# ---------------------------------------------------------------------------


def raw_predicate(
    sql: str | Fragment,
    bindings: Iterable[Any] | None = None,
    connector: Connector = Connector.AND,
    negated: bool = False,
) -> Fragment:
    """Attach a connector (and optionally NOT) to verbatim SQL.

    A :class:`Fragment` passed as *sql* keeps its own bindings; the caller's
    instance is not modified.
    """
    fragment = sql if isinstance(sql, Fragment) else Fragment(sql, tuple(bindings or ()))
    fragment = fragment.with_connector(connector)
    return fragment.negate() if negated else fragment


def multi_column(
    columns: Iterable[str],
    operator: Any,
    value: Any,
    mode: MultiColumnMode,
    connector: Connector = Connector.AND,
) -> Group:
    """Compare several columns against one value.

    ``ANY`` joins the comparisons with OR, ``ALL`` with AND, and ``NONE``
    is the NOT of the ``ANY`` group.
    """
    member_connector, negated = _MULTI_COLUMN[MultiColumnMode(mode)]
    group = Group(connector, negated)
    for column in columns:
        group.push(comparison(column, operator, value, member_connector))
    return group


def exists(
    query: Renderable,
    connector: Connector = Connector.AND,
    negated: bool = False,
) -> Fragment:
    """``EXISTS (<subquery>)`` over a snapshot of *query*'s current state."""
    sub = query.prepare()
    return Fragment(_EXISTS[negated].format(sub=sub.sql), sub.bindings, connector)
