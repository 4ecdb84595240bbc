"""Rendering abstractions: PreparedStatement and the Renderable ABC.

Every node of a statement tree (fragment, group, clause container, wrapper,
query) implements one method, :meth:`Renderable.prepare`, which walks the
tree once and returns the parameterized text together with its bindings.
Literal SQL is derived from that result by :func:`interpolate`, so the two
renderings cannot drift apart.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from fluentql.compile.render import interpolate
from fluentql.schema.expressions import PLACEHOLDER


@dataclass(frozen=True)
class PreparedStatement:
    """The output of a parameterized render.

    Attributes:
        sql: SQL text with one ``?`` per binding.
        bindings: Values for the placeholders, in left-to-right order.
    """

    sql: str
    bindings: tuple[Any, ...] = ()

    @property
    def placeholder_count(self) -> int:
        return self.sql.count(PLACEHOLDER)

    def to_sql(self) -> str:
        """Return the literal SQL string with every binding inlined."""
        return interpolate(self.sql, self.bindings)

    def __iter__(self) -> Iterator[Any]:
        # Allows ``sql, bindings = query.prepare()``.
        yield self.sql
        yield list(self.bindings)

    def __bool__(self) -> bool:
        return bool(self.sql)


EMPTY = PreparedStatement("")


class Renderable(ABC):
    """Anything that can be rendered as a statement or part of one."""

    @abstractmethod
    def prepare(self, leading: bool = False) -> PreparedStatement:
        """Render parameterized SQL.

        Args:
            leading: Whether the entry follows another entry in its
                container and must carry its connector.

        Returns:
            A :class:`PreparedStatement` whose placeholders align with its
            bindings.
        """

    def to_sql(self, leading: bool = False) -> str:
        """Render literal SQL by inlining the bindings of :meth:`prepare`."""
        return self.prepare(leading).to_sql()

    def __str__(self) -> str:
        return self.to_sql()
