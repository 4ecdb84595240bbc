"""Clause containers and parenthesized groups.

A :class:`ClauseContainer` holds the ordered entries of one SQL clause and
renders them with the clause keyword. A :class:`Group` is a keyword-less
container that wraps its body in parentheses and can itself be an entry of
another container, which gives arbitrary nesting.

Rendering (one tree walk for both output modes)::

    1. drop entries whose unprefixed rendering is empty
    2. first survivor renders without connector, the rest with it
    3. join with the clause's join token
    4. group: parenthesize if non-empty, then NOT / connector
       clause: default body, keyword, DISTINCT
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from fluentql.compile.base import EMPTY, PreparedStatement, Renderable
from fluentql.compile.fragment import Fragment, apply_prefixes
from fluentql.errors import ConfigurationError
from fluentql.schema.expressions import ClauseKind, Connector

Entry = Union[Fragment, "Group"]


@dataclass(frozen=True)
class ClauseLayout:
    """How one clause kind renders.

    Attributes:
        keyword: Clause keyword, or ``None`` when it has none.
        join_token: Text placed between rendered entries.
        default: Body rendered when the container is empty.
        replace_last: Whether a push replaces the single existing entry.
    """

    keyword: str | None
    join_token: str = " "
    default: str | None = None
    replace_last: bool = False


_LAYOUTS: dict[ClauseKind, ClauseLayout] = {
    ClauseKind.SELECT: ClauseLayout("SELECT", join_token="", default="*"),
    ClauseKind.FROM: ClauseLayout("FROM"),
    ClauseKind.JOIN: ClauseLayout(None),
    ClauseKind.WHERE: ClauseLayout("WHERE"),
    ClauseKind.GROUP_BY: ClauseLayout("GROUP BY", join_token=""),
    ClauseKind.HAVING: ClauseLayout("HAVING"),
    ClauseKind.ORDER_BY: ClauseLayout("ORDER BY", join_token=""),
    ClauseKind.LIMIT: ClauseLayout("LIMIT", replace_last=True),
    ClauseKind.OFFSET: ClauseLayout("OFFSET", replace_last=True),
    ClauseKind.NONE: ClauseLayout(None),
}


class ClauseContainer(Renderable):
    """Ordered entries of a single clause.

    Args:
        kind: The clause this container renders.
    """

    def __init__(self, kind: ClauseKind) -> None:
        self.kind = kind
        self._layout = _LAYOUTS[kind]
        self._entries: list[Entry] = []
        self._distinct = False

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def push(self, entry: Entry) -> ClauseContainer:
        """Append *entry*, or replace the current one for LIMIT / OFFSET."""
        if self._layout.replace_last:
            self._entries = [entry]
        else:
            self._entries.append(entry)
        return self

    def set_distinct(self, distinct: bool = True) -> ClauseContainer:
        """Emit ``DISTINCT`` after the keyword.

        Raises:
            ConfigurationError: Unless this is a SELECT container.
        """
        if self.kind is not ClauseKind.SELECT:
            raise ConfigurationError(
                f"DISTINCT is only valid on a select clause, not '{self.kind.value}'.",
                option="distinct",
            )
        self._distinct = distinct
        return self

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def distinct(self) -> bool:
        return self._distinct

    def is_empty(self) -> bool:
        """True when the container would render no body of its own."""
        return not self.prepare_body()

    def clone(self) -> ClauseContainer:
        """Return a copy that shares no entry with this container."""
        copy = self.__class__.__new__(self.__class__)
        copy.__dict__.update(self.__dict__)
        copy._entries = [entry.clone() for entry in self._entries]
        return copy

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def prepare_body(self) -> PreparedStatement:
        """Render the joined entries without keyword, default or prefixes."""
        pieces: list[str] = []
        bindings: list = []
        for entry in self._entries:
            # Prefixes are only applied to a non-empty body, so one render
            # both tests for emptiness and produces the entry.
            part = entry.prepare(leading=bool(pieces))
            if not part:
                continue
            pieces.append(part.sql)
            bindings.extend(part.bindings)
        return PreparedStatement(self._layout.join_token.join(pieces), tuple(bindings))

    def prepare(self, leading: bool = False) -> PreparedStatement:
        body = self.prepare_body()
        default = self._layout.default
        if not body and default is None:
            return EMPTY
        if not body:
            body = PreparedStatement(default)
        keyword = self._layout.keyword
        if keyword is None:
            return body
        if self._distinct and body.sql != default:
            keyword = f"{keyword} DISTINCT"
        return PreparedStatement(f"{keyword} {body.sql}", body.bindings)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value!r}, entries={len(self._entries)})"


class Group(ClauseContainer):
    """A parenthesized, independently connected sequence of entries.

    Args:
        connector: Token emitted before the group when it is not first.
        negated: Whether ``NOT`` precedes the opening parenthesis.
    """

    def __init__(
        self,
        connector: Connector | None = Connector.AND,
        negated: bool = False,
    ) -> None:
        super().__init__(ClauseKind.NONE)
        self.connector = connector
        self.negated = negated

    def prepare(self, leading: bool = False) -> PreparedStatement:
        body = self.prepare_body()
        if not body:
            return EMPTY
        return PreparedStatement(
            apply_prefixes(f"({body.sql})", self.connector, self.negated, leading),
            body.bindings,
        )
