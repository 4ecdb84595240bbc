"""The leaf node of every statement: a text fragment with positional bindings."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from fluentql.compile.base import PreparedStatement, Renderable
from fluentql.errors import BindingCountMismatchError
from fluentql.schema.expressions import PLACEHOLDER, Connector


@dataclass(frozen=True)
class Fragment(Renderable):
    """An immutable piece of SQL with one binding per ``?`` placeholder.

    Attributes:
        sql: Text containing positional placeholders.
        bindings: Values for the placeholders, left to right.
        connector: Token emitted in front of the fragment when it is not the
            first entry of its container.
        negated: Whether ``NOT`` is emitted between the connector and the
            text (``AND NOT `a` = ?``).

    Raises:
        BindingCountMismatchError: If the placeholder count in *sql* differs
            from ``len(bindings)``.
    """

    sql: str
    bindings: tuple[Any, ...] = field(default=())
    connector: Connector | None = None
    negated: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.bindings, tuple):
            object.__setattr__(self, "bindings", tuple(self.bindings))
        placeholders = self.sql.count(PLACEHOLDER)
        if placeholders != len(self.bindings):
            raise BindingCountMismatchError(self.sql, placeholders, len(self.bindings))

    # ------------------------------------------------------------------
    # Derivation (fragments are never changed after insertion)
    # ------------------------------------------------------------------

    def with_connector(self, connector: Connector | None) -> Fragment:
        """Return a copy that renders *connector* when not leading."""
        return replace(self, connector=connector)

    def negate(self) -> Fragment:
        """Return a copy prefixed with ``NOT``."""
        return replace(self, negated=True)

    def clone(self) -> Fragment:
        return replace(self)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def prepare(self, leading: bool = False) -> PreparedStatement:
        return PreparedStatement(
            apply_prefixes(self.sql, self.connector, self.negated, leading),
            self.bindings,
        )


def raw(sql: str, bindings: Iterable[Any] | None = None) -> Fragment:
    """Build a raw fragment: *sql* is emitted verbatim, unescaped.

    This is the only way to put caller-supplied SQL text into a statement,
    so it must never receive untrusted input.

    Args:
        sql: SQL text, with ``?`` for each binding.
        bindings: Optional values for the placeholders.
    """
    return Fragment(sql, tuple(bindings or ()))


def apply_prefixes(
    sql: str,
    connector: Connector | None,
    negated: bool,
    leading: bool,
) -> str:
    """Apply the NOT prefix, then the connector if the entry is not first."""
    if not sql:
        return sql
    if negated:
        sql = f"NOT {sql}"
    if leading and connector is not None:
        sql = f"{connector.value} {sql}"
    return sql
