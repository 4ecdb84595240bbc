"""fluentql compilation layer: fragments, containers and wrappers → SQL."""
from fluentql.compile.base import PreparedStatement, Renderable
from fluentql.compile.container import ClauseContainer, Group
from fluentql.compile.fragment import Fragment, raw
from fluentql.compile.render import interpolate, render_identifier, render_literal
from fluentql.compile.wrappers import Aggregate, Exists

__all__ = [
    "Aggregate",
    "ClauseContainer",
    "Exists",
    "Fragment",
    "Group",
    "PreparedStatement",
    "Renderable",
    "interpolate",
    "raw",
    "render_identifier",
    "render_literal",
]
