"""Pydantic model for per-query configuration.

The QueryConfig controls the names the aggregate wrapper uses for its
derived table and result column, and the value aggregate terminals return
when the database yields no row.

Use the defaults, or compose a config through the builder::

    from fluentql import QueryConfig

    config = (
        QueryConfig.builder()
        .aggregate_aliases(table="sub", column="result")
        .aggregate_default(None)
        .build()
    )
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fluentql.errors import ConfigurationError

_IDENTIFIER_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"


class QueryConfig(BaseModel):
    """Settings shared by a query and all of its clones.

    Attributes:
        aggregate_table_alias: Alias given to the wrapped base query.
        aggregate_column_alias: Alias of the single aggregate result column.
        aggregate_default: Returned by aggregate terminals on an empty result.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    aggregate_table_alias: str = Field(default="temp_table", pattern=_IDENTIFIER_PATTERN)
    aggregate_column_alias: str = Field(default="aggregate", pattern=_IDENTIFIER_PATTERN)
    aggregate_default: Any = 0

    @classmethod
    def builder(cls) -> "QueryConfigBuilder":
        """Return a :class:`QueryConfigBuilder` starting from the defaults."""
        return QueryConfigBuilder()


class QueryConfigBuilder:
    """Fluent builder for :class:`QueryConfig`.

    Always obtained via :meth:`QueryConfig.builder`.
    """

    def __init__(self) -> None:
        defaults = QueryConfig()
        self._table_alias = defaults.aggregate_table_alias
        self._column_alias = defaults.aggregate_column_alias
        self._default: Any = defaults.aggregate_default

    def aggregate_aliases(
        self,
        table: str | None = None,
        column: str | None = None,
    ) -> "QueryConfigBuilder":
        """Override the derived-table and/or result-column alias.

        Args:
            table: Alias for the wrapped base query.
            column: Alias for the aggregate result column.
        """
        if table is not None:
            self._table_alias = table
        if column is not None:
            self._column_alias = column
        return self

    def aggregate_default(self, value: Any) -> "QueryConfigBuilder":
        """Set the value aggregate terminals return when no row comes back."""
        self._default = value
        return self

    def build(self) -> QueryConfig:
        """Validate the configuration and return the :class:`QueryConfig`.

        Raises:
            ConfigurationError: When both aliases are the same name, which
                would make the aggregate column shadow its own derived table.
            pydantic.ValidationError: When an alias is not a plain identifier.
        """
        if self._table_alias == self._column_alias:
            raise ConfigurationError(
                f"Aggregate table and column aliases must differ "
                f"(both are '{self._table_alias}').",
                option="aggregate_aliases",
            )
        return QueryConfig(
            aggregate_table_alias=self._table_alias,
            aggregate_column_alias=self._column_alias,
            aggregate_default=self._default,
        )
