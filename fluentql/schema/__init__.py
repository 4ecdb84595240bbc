from fluentql.schema.column_reference import ColumnReference
from fluentql.schema.config import QueryConfig, QueryConfigBuilder
from fluentql.schema.expressions import (
    AggregateMethod,
    ClauseKind,
    Connector,
    JoinType,
    MultiColumnMode,
    SortDirection,
)

__all__ = [
    "AggregateMethod",
    "ClauseKind",
    "ColumnReference",
    "Connector",
    "JoinType",
    "MultiColumnMode",
    "QueryConfig",
    "QueryConfigBuilder",
    "SortDirection",
]
