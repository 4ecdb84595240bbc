"""Constants and enums shared by the fragment families and clause containers.

The clause kinds, connectors and operator groups live here so that the
validator, the compiler and the facade agree on one vocabulary.
"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Connectors
# ---------------------------------------------------------------------------


class Connector(str, Enum):
    """Token placed in front of every non-first entry of a container.

    ``COMMA`` is used by list clauses (SELECT, GROUP BY, ORDER BY) whose
    containers join entries with an empty string.
    """

    AND = "AND"
    OR = "OR"
    COMMA = ","


# ---------------------------------------------------------------------------
# Clause kinds
# ---------------------------------------------------------------------------


class ClauseKind(str, Enum):
    """The clause a container renders. ``NONE`` is used for groups."""

    SELECT = "select"
    FROM = "from"
    JOIN = "join"
    WHERE = "where"
    GROUP_BY = "group_by"
    HAVING = "having"
    ORDER_BY = "order_by"
    LIMIT = "limit"
    OFFSET = "offset"
    NONE = "none"


#: Clause kinds owned by a query, in the order they are rendered.
QUERY_CLAUSES: tuple[ClauseKind, ...] = (
    ClauseKind.SELECT,
    ClauseKind.FROM,
    ClauseKind.JOIN,
    ClauseKind.WHERE,
    ClauseKind.GROUP_BY,
    ClauseKind.HAVING,
    ClauseKind.ORDER_BY,
    ClauseKind.LIMIT,
    ClauseKind.OFFSET,
)


# ---------------------------------------------------------------------------
# Joins, sorting and aggregates
# ---------------------------------------------------------------------------


class JoinType(str, Enum):
    """Join keywords supported by the join clause."""

    INNER = "INNER JOIN"
    LEFT = "LEFT JOIN"
    CROSS = "CROSS JOIN"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class AggregateMethod(str, Enum):
    """Aggregate functions available to the aggregate wrapper."""

    COUNT = "COUNT"
    SUM = "SUM"
    AVG = "AVG"
    MIN = "MIN"
    MAX = "MAX"


class MultiColumnMode(str, Enum):
    """How a multi-column predicate combines its per-column comparisons."""

    ANY = "any"
    ALL = "all"
    NONE = "none"


# ---------------------------------------------------------------------------
# Operator groups (frozensets for O(1) membership tests)
# ---------------------------------------------------------------------------

#: Binary comparison operators, rendered verbatim.
COMPARISON_OPERATORS: tuple[str, ...] = (
    "==", "=", "!=", "<>", ">", "<", ">=", "<=", "!<", "!>",
)

#: Pattern-match operators, matched case-insensitively and rendered upper case.
PATTERN_OPERATORS: tuple[str, ...] = ("LIKE", "NOT LIKE")

#: Every operator accepted by comparison-style fragment families.
ALLOWED_OPERATORS: frozenset[str] = frozenset(COMPARISON_OPERATORS + PATTERN_OPERATORS)

#: Sort directions accepted by ORDER BY.
SORT_DIRECTIONS: frozenset[str] = frozenset(d.value for d in SortDirection)

#: Positional placeholder emitted in parameterized SQL.
PLACEHOLDER = "?"
