"""Argument validation for the fragment families.

Every check runs when a fragment is constructed, before anything can be
rendered, so an invalid fluent chain fails at the offending call.
"""
from __future__ import annotations

from typing import Any

from fluentql.errors import (
    InvalidBetweenValueArrayLength,
    InvalidComparisonOperatorError,
    InvalidComparisonValueError,
    InvalidPaginationValueError,
    InvalidSortDirectionError,
)
from fluentql.schema.expressions import (
    ALLOWED_OPERATORS,
    COMPARISON_OPERATORS,
    PATTERN_OPERATORS,
    SORT_DIRECTIONS,
)

#: Number of bounds a BETWEEN predicate takes.
RANGE_ARITY = 2


def validate_operator(operator: Any) -> str:
    """Return the normalised operator or raise if it is not whitelisted.

    Pattern operators are matched case-insensitively and returned upper case.
    Symbolic operators must match exactly.

    Raises:
        InvalidComparisonOperatorError: For non-strings and unknown operators.
    """
    if isinstance(operator, str):
        normalised = " ".join(operator.upper().split())
        if normalised in ALLOWED_OPERATORS:
            return normalised
    raise InvalidComparisonOperatorError(
        operator, list(COMPARISON_OPERATORS + PATTERN_OPERATORS)
    )


def validate_range(values: Any) -> tuple[Any, Any]:
    """Return the two bounds of a BETWEEN predicate.

    Raises:
        InvalidBetweenValueArrayLength: Unless *values* is a list or tuple
            holding exactly two elements.
    """
    if not isinstance(values, (list, tuple)):
        raise InvalidBetweenValueArrayLength(None, RANGE_ARITY)
    if len(values) != RANGE_ARITY:
        raise InvalidBetweenValueArrayLength(len(values), RANGE_ARITY)
    return values[0], values[1]


def validate_scalar(column: str, value: Any) -> Any:
    """Return *value* if it can be bound to a single placeholder.

    Raises:
        InvalidComparisonValueError: For lists, tuples and sets, whose
            literal form would expand into several values.
    """
    if isinstance(value, (list, tuple, set, frozenset)):
        raise InvalidComparisonValueError(column, value)
    return value


def validate_direction(direction: Any) -> str:
    """Return the upper-cased sort direction.

    Raises:
        InvalidSortDirectionError: Unless *direction* is ASC or DESC.
    """
    if isinstance(direction, str) and direction.upper() in SORT_DIRECTIONS:
        return direction.upper()
    raise InvalidSortDirectionError(direction)


def validate_pagination(clause: str, value: Any) -> int:
    """Return *value* if it is a usable LIMIT / OFFSET.

    Raises:
        InvalidPaginationValueError: For bools, non-ints and negatives.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidPaginationValueError(clause, value)
    return value
