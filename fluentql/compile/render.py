"""Value and identifier rendering.

``render_literal`` turns a Python value into SQL literal text and
``render_identifier`` turns a column or table reference into quoted
identifier text. ``interpolate`` merges a parameterized statement with its
bindings and is the only path by which literal-mode SQL is produced.

Raw fragments are the one place where caller text reaches the output
unescaped; everything passing through these functions is quoted.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from fluentql.schema.column_reference import ColumnReference
from fluentql.schema.expressions import PLACEHOLDER


def render_literal(value: Any) -> str:
    """Return the SQL literal text for *value*.

    Args:
        value: ``None``, a bool, a number, a string, a date/time, an enum
            member, bytes, or a list/tuple/set of those.

    Returns:
        Literal SQL text. Sequences render as a comma-joined list without
        surrounding parentheses.
    """
    if value is None:
        return "NULL"
    # Before the numeric and string checks, which IntEnum and StrEnum also pass.
    if isinstance(value, Enum):
        return render_literal(value.value)
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, str):
        return _quote_string(value)
    if isinstance(value, datetime):
        return _quote_string(value.isoformat(sep=" "))
    if isinstance(value, (date, time)):
        return _quote_string(value.isoformat())
    if isinstance(value, (bytes, bytearray)):
        return f"X'{bytes(value).hex().upper()}'"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(render_literal(v) for v in value)
    return _quote_string(str(value))


def render_identifier(column: str) -> str:
    """Quote every dot segment of *column*; see :class:`ColumnReference`."""
    return ColumnReference.parse(column).quoted()


def interpolate(sql: str, bindings: Sequence[Any]) -> str:
    """Substitute each ``?`` in *sql* with the literal of the matching binding.

    The template is scanned, not the output, so placeholders that appear
    inside substituted string values are left alone.

    Args:
        sql: Parameterized SQL text.
        bindings: Values aligned left to right with the placeholders.

    Returns:
        The literal SQL string.
    """
    pieces = sql.split(PLACEHOLDER)
    out = [pieces[0]]
    for i, piece in enumerate(pieces[1:]):
        out.append(render_literal(bindings[i]))
        out.append(piece)
    return "".join(out)


def _quote_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("'", "''")
    return f"'{escaped}'"
