"""Custom exception hierarchy for fluentql.

All public errors inherit from FluentQLError so callers can catch the base
class for any fluentql-specific failure.
"""
from __future__ import annotations

from typing import Any


class FluentQLError(Exception):
    """Base exception for all fluentql errors."""


class ValidationError(FluentQLError):
    """Raised when a fluent call receives arguments that cannot form valid SQL.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. INVALID_COMPARISON_OPERATOR).
        details: Extra context describing the offending input.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response suitable for API payloads."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class InvalidComparisonOperatorError(ValidationError):
    """Raised when a comparison uses an operator outside the whitelist."""

    def __init__(self, operator: Any, allowed_operators: list[str]) -> None:
        super().__init__(
            f"Invalid comparison operator {operator!r}. "
            f"Valid operators are: {', '.join(allowed_operators)}.",
            code="INVALID_COMPARISON_OPERATOR",
            details={
                "operator": operator,
                "allowed_operators": allowed_operators,
            },
        )


class InvalidBetweenValueArrayLength(ValidationError):
    """Raised when a range predicate does not receive exactly two values.

    Args:
        length: Length of the supplied sequence, or ``None`` when the value
            was not a list or tuple at all.
    """

    def __init__(self, length: int | None, expected: int = 2) -> None:
        received = "a non-sequence value" if length is None else f"{length} value(s)"
        super().__init__(
            f"BETWEEN requires exactly {expected} values, received {received}.",
            code="INVALID_BETWEEN_VALUE_LENGTH",
            details={"expected": expected, "length": length},
        )


class MissingRequiredArgument(ValidationError):
    """Raised when a builder method is called without a mandatory argument."""

    def __init__(self, caller: str, method: str, argument: str | None = None) -> None:
        what = f"'{argument}'" if argument else "a required argument"
        super().__init__(
            f"{caller}.{method}() is missing {what}.",
            code="MISSING_REQUIRED_ARGUMENT",
            details={"caller": caller, "method": method, "argument": argument},
        )


class BindingCountMismatchError(ValidationError):
    """Raised when a fragment's placeholder count differs from its bindings."""

    def __init__(self, sql: str, placeholders: int, bindings: int) -> None:
        super().__init__(
            f"Fragment {sql!r} has {placeholders} placeholder(s) "
            f"but {bindings} binding(s).",
            code="BINDING_COUNT_MISMATCH",
            details={
                "sql": sql,
                "placeholders": placeholders,
                "bindings": bindings,
            },
        )


class InvalidIdentifierError(ValidationError):
    """Raised when an identifier contains the placeholder character ``?``.

    Identifiers are emitted into the parameterized text, where a ``?`` would
    be read as a placeholder.
    """

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"Identifier {identifier!r} contains '?', which is reserved for "
            "placeholders. Use a raw fragment for such names.",
            code="INVALID_IDENTIFIER",
            details={"identifier": identifier},
        )


class InvalidComparisonValueError(ValidationError):
    """Raised when a scalar comparison receives a list of values."""

    def __init__(self, column: str, value: Any) -> None:
        super().__init__(
            f"Comparison on {column!r} expects a single value, got "
            f"{type(value).__name__}. Use where_in() for lists of values.",
            code="INVALID_COMPARISON_VALUE",
            details={"column": column, "value_type": type(value).__name__},
        )


class InvalidSortDirectionError(ValidationError):
    """Raised when ORDER BY receives a direction other than ASC or DESC."""

    def __init__(self, direction: Any) -> None:
        super().__init__(
            f"Invalid sort direction {direction!r}. Use 'ASC' or 'DESC'.",
            code="INVALID_SORT_DIRECTION",
            details={"direction": direction, "allowed": ["ASC", "DESC"]},
        )


class InvalidPaginationValueError(ValidationError):
    """Raised when LIMIT or OFFSET receives anything but a non-negative int."""

    def __init__(self, clause: str, value: Any) -> None:
        super().__init__(
            f"{clause} expects a non-negative integer, got {value!r}.",
            code="INVALID_PAGINATION_VALUE",
            details={"clause": clause, "value": value},
        )


class ConfigurationError(FluentQLError):
    """Raised when a builder or QueryConfig is configured inconsistently.

    Detected at call time, before anything is rendered.

    Args:
        message: Human-readable description.
        option: The option or clause the misconfiguration concerns.
    """

    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


class TableNotSetError(FluentQLError):
    """Raised when a statement is rendered or executed without a table.

    Args:
        caller: Name of the class whose terminal operation was invoked.
    """

    def __init__(self, caller: str) -> None:
        super().__init__(
            f"{caller}: no table set. Call from_table() before rendering "
            "or executing the statement."
        )
        self.caller = caller


class DatabaseExecutionError(FluentQLError):
    """Raised when the database collaborator fails to run a statement.

    Args:
        message: Human-readable description.
        sql: The parameterized statement that failed.
        bindings: The bindings that were sent with it.
    """

    def __init__(
        self,
        message: str,
        sql: str,
        bindings: tuple[Any, ...] = (),
    ) -> None:
        super().__init__(message)
        self.sql = sql
        self.bindings = bindings
