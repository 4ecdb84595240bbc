"""fluentql – fluent SQL statement building with dual-mode rendering.

Every statement renders two ways from one tree walk: literal SQL with the
values inlined (for display and logging) and parameterized SQL with a
positionally aligned binding tuple (for execution).

Public API
----------
``Query``
    Fluent facade: build SELECT / INSERT / UPDATE / DELETE statements,
    render them, or run them through a ``Database``.

``Query.raw``
    Escape hatch for verbatim SQL fragments.

Re-exported types
-----------------
``PreparedStatement``, ``Fragment``, ``Group``, ``ClauseContainer``,
``Aggregate``, ``Exists``, ``Database``, ``QueryConfig``, the clause and
operator enums, and all error classes.

Execution
---------
``Database`` is the async executor interface. An implementation over a
SQLAlchemy engine is available with the ``sqlalchemy`` extra::

    from fluentql.execute.engine import SQLAlchemyDatabase
"""

from __future__ import annotations

from fluentql.compile.base import PreparedStatement, Renderable
from fluentql.compile.container import ClauseContainer, Group
from fluentql.compile.fragment import Fragment
from fluentql.compile.render import render_identifier, render_literal
from fluentql.compile.wrappers import Aggregate, Exists
from fluentql.errors import (
    BindingCountMismatchError,
    ConfigurationError,
    DatabaseExecutionError,
    FluentQLError,
    InvalidBetweenValueArrayLength,
    InvalidComparisonOperatorError,
    InvalidComparisonValueError,
    InvalidIdentifierError,
    InvalidPaginationValueError,
    InvalidSortDirectionError,
    MissingRequiredArgument,
    TableNotSetError,
    ValidationError,
)
from fluentql.execute.base import Database
from fluentql.query import Query
from fluentql.schema.config import QueryConfig, QueryConfigBuilder
from fluentql.schema.expressions import (
    AggregateMethod,
    ClauseKind,
    Connector,
    JoinType,
    MultiColumnMode,
    SortDirection,
)
from fluentql.scopes import HavingScope, WhereScope

__all__ = [
    # Facade
    "Query",
    "WhereScope",
    "HavingScope",
    # Compilation
    "Aggregate",
    "ClauseContainer",
    "Exists",
    "Fragment",
    "Group",
    "PreparedStatement",
    "Renderable",
    "render_identifier",
    "render_literal",
    # Execution
    "Database",
    # Configuration and enums
    "QueryConfig",
    "QueryConfigBuilder",
    "AggregateMethod",
    "ClauseKind",
    "Connector",
    "JoinType",
    "MultiColumnMode",
    "SortDirection",
    # Errors
    "FluentQLError",
    "ValidationError",
    "InvalidComparisonOperatorError",
    "InvalidComparisonValueError",
    "InvalidIdentifierError",
    "InvalidBetweenValueArrayLength",
    "MissingRequiredArgument",
    "BindingCountMismatchError",
    "InvalidSortDirectionError",
    "InvalidPaginationValueError",
    "ConfigurationError",
    "TableNotSetError",
    "DatabaseExecutionError",
]

__version__ = "0.1.0"
