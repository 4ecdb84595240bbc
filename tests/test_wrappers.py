"""Unit tests for the aggregate and exists wrappers."""

from __future__ import annotations

import pytest

from fluentql import Aggregate, Exists, Query, QueryConfig
from fluentql.errors import MissingRequiredArgument


def _base() -> Query:
    return Query("users").where("id", ">", 20)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


class TestAggregate:
    def test_count_star(self):
        prepared = Aggregate(_base(), "COUNT").prepare()
        assert prepared.sql == (
            "SELECT COUNT(*) AS aggregate FROM "
            "(SELECT * FROM `users` WHERE `id` > ?) AS temp_table"
        )
        assert prepared.bindings == (20,)

    def test_count_wildcard_equals_no_column(self):
        assert Aggregate(_base(), "count", "*").to_sql() == Aggregate(_base(), "count").to_sql()

    @pytest.mark.parametrize("method", ["SUM", "AVG", "MIN", "MAX"])
    def test_column_is_prefixed_with_alias(self, method):
        assert Aggregate(_base(), method, "salary").to_sql() == (
            f"SELECT {method}(temp_table.`salary`) AS aggregate FROM "
            "(SELECT * FROM `users` WHERE `id` > 20) AS temp_table"
        )

    def test_qualified_column_uses_bare_name(self):
        sql = Aggregate(Query("users"), "max", "users.age").to_sql()
        assert sql.startswith("SELECT MAX(temp_table.`age`) AS aggregate")

    def test_raw_column_is_verbatim(self):
        aggregate = Aggregate(_base(), "COUNT", Query.raw("CASE WHEN active = 1 THEN 1 END"))
        assert aggregate.to_sql() == (
            "SELECT COUNT(CASE WHEN active = 1 THEN 1 END) AS aggregate FROM "
            "(SELECT * FROM `users` WHERE `id` > 20) AS temp_table"
        )

    def test_raw_column_bindings_come_first(self):
        aggregate = Aggregate(_base(), "MIN", Query.raw("LENGTH(name) - ?", [1]))
        assert aggregate.prepare().bindings == (1, 20)

    @pytest.mark.parametrize("method", ["SUM", "AVG", "MIN", "MAX"])
    @pytest.mark.parametrize("column", [None, "*"])
    def test_missing_column_raises(self, method, column):
        with pytest.raises(MissingRequiredArgument) as exc_info:
            Aggregate(_base(), method, column)
        assert exc_info.value.details == {
            "caller": "Aggregate",
            "method": method.lower(),
            "argument": "column",
        }

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            Aggregate(_base(), "MEDIAN", "age")

    def test_custom_aliases(self):
        aggregate = Aggregate(Query("users"), "SUM", "age", table_alias="sub", column_alias="total")
        assert aggregate.to_sql() == (
            "SELECT SUM(sub.`age`) AS total FROM (SELECT * FROM `users`) AS sub"
        )


class TestQueryAsAggregate:
    def test_select_list_is_dropped(self):
        query = Query("users").select("id", "name").where("a", 1)
        assert query.as_aggregate("max", "age").to_sql() == (
            "SELECT MAX(temp_table.`age`) AS aggregate FROM "
            "(SELECT * FROM `users` WHERE `a` = 1) AS temp_table"
        )
        assert query.to_sql() == "SELECT `id`, `name` FROM `users` WHERE `a` = 1"

    def test_select_list_kept_with_having(self):
        query = Query("users").select("role").group_by("role").having("role", "!=", "guest")
        assert query.as_aggregate("count").to_sql() == (
            "SELECT COUNT(*) AS aggregate FROM (SELECT `role` FROM `users` "
            "GROUP BY `role` HAVING `role` != 'guest') AS temp_table"
        )

    def test_select_list_kept_with_distinct(self):
        query = Query("users").select("role").distinct()
        assert query.as_aggregate("count").to_sql() == (
            "SELECT COUNT(*) AS aggregate FROM (SELECT DISTINCT `role` FROM `users`) AS temp_table"
        )

    def test_base_is_snapshotted(self):
        query = Query("users")
        aggregate = query.as_aggregate("count")
        query.where("a", 1)
        assert aggregate.to_sql() == (
            "SELECT COUNT(*) AS aggregate FROM (SELECT * FROM `users`) AS temp_table"
        )

    def test_config_aliases(self):
        config = QueryConfig.builder().aggregate_aliases(table="t", column="v").build()
        query = Query("users", config=config)
        assert query.as_aggregate("sum", "age").to_sql() == (
            "SELECT SUM(t.`age`) AS v FROM (SELECT * FROM `users`) AS t"
        )


# ---------------------------------------------------------------------------
# Exists
# ---------------------------------------------------------------------------


def test_exists_statement():
    prepared = Exists(Query("users").where("id", 1)).prepare()
    assert prepared.sql == "SELECT EXISTS(SELECT * FROM `users` WHERE `id` = ?)"
    assert prepared.bindings == (1,)
    assert Query("users").where("id", 1).as_exists().to_sql() == (
        "SELECT EXISTS(SELECT * FROM `users` WHERE `id` = 1)"
    )


def test_exists_as_predicate():
    fragment = Exists(Query("posts")).as_predicate(negated=True)
    assert fragment.to_sql(leading=True) == "AND NOT EXISTS (SELECT * FROM `posts`)"
