"""Typed column-reference class.

Owns the parsing of ``"table.column"``, ``"schema.table.column"`` and
``"column AS alias"`` strings so that quoting never has to split strings by
hand anywhere else.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from fluentql.errors import InvalidIdentifierError
from fluentql.schema.expressions import PLACEHOLDER

_ALIAS_RE = re.compile(r"^(?P<ref>.+?)\s+as\s+(?P<alias>[^\s]+)$", re.IGNORECASE)

#: Character used to quote identifiers.
IDENTIFIER_QUOTE = "`"


def quote_segment(segment: str) -> str:
    """Quote a single identifier segment, doubling embedded quote characters.

    ``*`` is returned bare so that ``users.*`` stays a wildcard.

    Raises:
        InvalidIdentifierError: If *segment* contains a ``?``.
    """
    if segment == "*":
        return segment
    if PLACEHOLDER in segment:
        raise InvalidIdentifierError(segment)
    escaped = segment.replace(IDENTIFIER_QUOTE, IDENTIFIER_QUOTE * 2)
    return f"{IDENTIFIER_QUOTE}{escaped}{IDENTIFIER_QUOTE}"


@dataclass(frozen=True)
class ColumnReference:
    """A parsed, possibly qualified and aliased, identifier.

    Attributes:
        segments: Dot-separated path segments, outermost qualifier first.
        alias: Optional ``AS`` alias.
    """

    segments: tuple[str, ...]
    alias: str | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, ref: str) -> ColumnReference:
        """Parse an identifier string.

        Args:
            ref: ``"column"``, ``"table.column"`` or either form followed by
                ``" AS alias"`` (keyword in any case).

        Returns:
            A :class:`ColumnReference` instance.
        """
        ref = ref.strip()
        alias: str | None = None
        match = _ALIAS_RE.match(ref)
        if match:
            ref, alias = match.group("ref").strip(), match.group("alias")
        return cls(segments=tuple(ref.split(".")), alias=alias)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def column(self) -> str:
        """The last segment (the column or table name itself)."""
        return self.segments[-1]

    def quoted(self) -> str:
        """Render the reference with every segment quoted."""
        text = ".".join(quote_segment(s) for s in self.segments)
        if self.alias is not None:
            text = f"{text} AS {quote_segment(self.alias)}"
        return text
