"""Fragment families for the non-predicate clauses.

SELECT list, FROM, JOIN, GROUP BY, ORDER BY, LIMIT / OFFSET, and the
column lists of INSERT and UPDATE.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fluentql.compile.fragment import Fragment
from fluentql.compile.render import render_identifier
from fluentql.schema.column_reference import quote_segment
from fluentql.schema.expressions import PLACEHOLDER, Connector, JoinType
from fluentql.validate.validator import (
    validate_direction,
    validate_operator,
    validate_pagination,
)

# ---------------------------------------------------------------------------
# SELECT / FROM
# ---------------------------------------------------------------------------


def select_column(column: str | Fragment) -> Fragment:
    """A select-list entry; raw fragments are kept verbatim."""
    if isinstance(column, Fragment):
        return column.with_connector(Connector.COMMA)
    return Fragment(render_identifier(column), (), Connector.COMMA)


def from_table(table: str, alias: str | None = None) -> Fragment:
    sql = render_identifier(table)
    if alias:
        sql = f"{sql} AS {quote_segment(alias)}"
    return Fragment(sql)


# ---------------------------------------------------------------------------
# JOIN
# ---------------------------------------------------------------------------


def join(
    join_type: JoinType,
    table: str,
    first: str,
    operator: Any,
    second: str,
) -> Fragment:
    """``<TYPE> JOIN `table` ON `first` op `second```.

    Raises:
        InvalidComparisonOperatorError: If *operator* is not whitelisted.
    """
    op = validate_operator(operator)
    return Fragment(
        f"{join_type.value} {render_identifier(table)} "
        f"ON {render_identifier(first)} {op} {render_identifier(second)}"
    )


def cross_join(table: str) -> Fragment:
    return Fragment(f"{JoinType.CROSS.value} {render_identifier(table)}")


# ---------------------------------------------------------------------------
# GROUP BY / ORDER BY
# ---------------------------------------------------------------------------


def group_column(column: str | Fragment) -> Fragment:
    if isinstance(column, Fragment):
        return column.with_connector(Connector.COMMA)
    return Fragment(render_identifier(column), (), Connector.COMMA)


def order_column(column: str | Fragment, direction: str = "ASC") -> Fragment:
    """``col ASC`` or ``col DESC``; a raw column keeps its own bindings.

    Raises:
        InvalidSortDirectionError: Unless *direction* is ASC or DESC.
    """
    direction = validate_direction(direction)
    if isinstance(column, Fragment):
        return Fragment(f"{column.sql} {direction}", column.bindings, Connector.COMMA)
    return Fragment(f"{render_identifier(column)} {direction}", (), Connector.COMMA)


# ---------------------------------------------------------------------------
# LIMIT / OFFSET
# ---------------------------------------------------------------------------


def limit(count: int) -> Fragment:
    return Fragment(PLACEHOLDER, (validate_pagination("LIMIT", count),))


def offset(count: int) -> Fragment:
    return Fragment(PLACEHOLDER, (validate_pagination("OFFSET", count),))


# ---------------------------------------------------------------------------
# INSERT / UPDATE column lists
# ---------------------------------------------------------------------------


def insert_values(values: Mapping[str, Any]) -> Fragment:
    """``(`a`, `b`) VALUES (?, ?)`` in the mapping's iteration order."""
    columns = ", ".join(render_identifier(column) for column in values)
    placeholders = ", ".join(PLACEHOLDER for _ in values)
    return Fragment(f"({columns}) VALUES ({placeholders})", tuple(values.values()))


def assignments(values: Mapping[str, Any]) -> Fragment:
    """``SET `a` = ?, `b` = ?`` in the mapping's iteration order."""
    pairs = ", ".join(f"{render_identifier(column)} = {PLACEHOLDER}" for column in values)
    return Fragment(f"SET {pairs}", tuple(values.values()))
