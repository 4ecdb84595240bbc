"""Unit tests for the predicate and clause fragment families."""

from __future__ import annotations

import pytest

from fluentql import Query
from fluentql.compile import clauses, families
from fluentql.errors import (
    InvalidBetweenValueArrayLength,
    InvalidComparisonOperatorError,
    InvalidComparisonValueError,
    InvalidPaginationValueError,
    InvalidSortDirectionError,
)
from fluentql.schema.expressions import COMPARISON_OPERATORS, Connector, JoinType, MultiColumnMode

# ---------------------------------------------------------------------------
# Operator whitelist
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("operator", COMPARISON_OPERATORS)
def test_every_whitelisted_operator_is_accepted(operator):
    fragment = families.comparison("age", operator, 1)
    assert fragment.sql == f"`age` {operator} ?"


@pytest.mark.parametrize("operator", ["like", "LIKE", "not like", "NOT  LIKE"])
def test_pattern_operators_are_normalised(operator):
    fragment = families.comparison("name", operator, "Jo%")
    assert fragment.to_sql() in ("`name` LIKE 'Jo%'", "`name` NOT LIKE 'Jo%'")


@pytest.mark.parametrize("operator", [None, 1, [], "===", "o", "taco", "IN"])
def test_invalid_operator_fails_at_construction(operator):
    with pytest.raises(InvalidComparisonOperatorError) as exc_info:
        families.comparison("age", operator, 1)
    assert exc_info.value.code == "INVALID_COMPARISON_OPERATOR"
    assert exc_info.value.details["operator"] == operator
    assert "=" in exc_info.value.details["allowed_operators"]


def test_invalid_operator_error_response():
    with pytest.raises(InvalidComparisonOperatorError) as exc_info:
        families.column_comparison("a", "~", "b")
    response = exc_info.value.to_error_response()
    assert response["error"] == "INVALID_COMPARISON_OPERATOR"
    assert response["details"]["operator"] == "~"


# ---------------------------------------------------------------------------
# Comparison shapes
# ---------------------------------------------------------------------------


def test_column_comparison_binds_nothing():
    fragment = families.column_comparison("created_at", "=", "updated_at")
    assert fragment.to_sql() == "`created_at` = `updated_at`"
    assert fragment.bindings == ()


def test_negated_comparison():
    fragment = families.comparison("users", "=", "John", negated=True)
    assert fragment.to_sql(leading=True) == "AND NOT `users` = 'John'"


@pytest.mark.parametrize("value", [[1, 2], (1, 2), {1}])
def test_comparison_rejects_sequence_values(value):
    with pytest.raises(InvalidComparisonValueError) as exc_info:
        families.comparison("x", "=", value)
    assert exc_info.value.details["column"] == "x"
    assert "where_in" in str(exc_info.value)


def test_where_with_list_points_to_where_in():
    query = Query("users")
    with pytest.raises(InvalidComparisonValueError):
        query.where("id", [1, 2])
    with pytest.raises(InvalidComparisonValueError):
        query.where_any(["a", "b"], "=", [1, 2])
    assert query.to_sql() == "SELECT * FROM `users`"


def test_null_checks():
    assert families.null_check("sex").to_sql() == "`sex` IS NULL"
    assert families.null_check("sex", negated=True).to_sql() == "`sex` IS NOT NULL"
    assert families.null_check("sex", Connector.OR).to_sql(leading=True) == "OR `sex` IS NULL"


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


class TestMembership:
    def test_in_list(self):
        fragment = families.membership("name", ["John", "James", "Bob"])
        assert fragment.to_sql() == "`name` IN ('John', 'James', 'Bob')"
        assert fragment.sql == "`name` IN (?, ?, ?)"
        assert fragment.bindings == ("John", "James", "Bob")

    def test_not_in_list(self):
        fragment = families.membership("name", ("John", "James"), negated=True)
        assert fragment.to_sql() == "`name` NOT IN ('John', 'James')"

    def test_generator_values(self):
        fragment = families.membership("id", (i for i in range(3)))
        assert fragment.to_sql() == "`id` IN (0, 1, 2)"

    def test_single_string_is_one_value(self):
        assert families.membership("name", "John").to_sql() == "`name` IN ('John')"

    def test_empty_lists_render_constant_predicates(self):
        assert families.membership("id", []).to_sql() == "0 = 1"
        assert families.membership("id", [], negated=True).to_sql() == "1 = 1"


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


class TestRange:
    def test_between(self):
        fragment = families.value_range("age", [18, 25])
        assert fragment.to_sql() == "`age` BETWEEN 18 AND 25"
        assert fragment.sql == "`age` BETWEEN ? AND ?"

    def test_not_between(self):
        assert families.value_range("age", (18, 25), negated=True).to_sql() == (
            "`age` NOT BETWEEN 18 AND 25"
        )

    def test_column_range(self):
        fragment = families.column_range("created_at", ["updated_at", "deleted_at"])
        assert fragment.to_sql() == "`created_at` BETWEEN `updated_at` AND `deleted_at`"

    @pytest.mark.parametrize(
        ("values", "length"),
        [([], 0), ([1], 1), ([1, 2, 3], 3), ({"a": 1, "b": 2}, None), (None, None), ("ab", None)],
    )
    def test_arity_checked_before_rendering(self, values, length):
        with pytest.raises(InvalidBetweenValueArrayLength) as exc_info:
            families.value_range("age", values)
        assert exc_info.value.details == {"expected": 2, "length": length}

    def test_column_range_arity(self):
        with pytest.raises(InvalidBetweenValueArrayLength):
            families.column_range("created_at", ["updated_at"])


# ---------------------------------------------------------------------------
# Multi-column, raw and exists
# ---------------------------------------------------------------------------


class TestMultiColumn:
    COLUMNS = ["name", "email"]

    def test_any(self):
        group = families.multi_column(self.COLUMNS, "LIKE", "Example%", MultiColumnMode.ANY)
        assert group.to_sql(leading=True) == (
            "AND (`name` LIKE 'Example%' OR `email` LIKE 'Example%')"
        )

    def test_all(self):
        group = families.multi_column(self.COLUMNS, "LIKE", "Example%", MultiColumnMode.ALL)
        assert group.to_sql(leading=True) == (
            "AND (`name` LIKE 'Example%' AND `email` LIKE 'Example%')"
        )

    def test_none(self):
        group = families.multi_column(self.COLUMNS, "LIKE", "Example%", "none")
        assert group.to_sql(leading=True) == (
            "AND NOT (`name` LIKE 'Example%' OR `email` LIKE 'Example%')"
        )
        assert group.prepare().bindings == ("Example%", "Example%")

    def test_no_columns_is_empty(self):
        assert families.multi_column([], "=", 1, MultiColumnMode.ANY).to_sql() == ""


def test_raw_predicate_keeps_caller_fragment_untouched():
    fragment = Query.raw("price > IF(state = 'TX', ?, 100)", [200])
    attached = families.raw_predicate(fragment, connector=Connector.OR)
    assert attached.to_sql(leading=True) == "OR price > IF(state = 'TX', 200, 100)"
    assert fragment.connector is None


def test_exists_snapshots_subquery():
    sub = Query("salary").select(Query.raw("1")).where("name", "John")
    fragment = families.exists(sub, negated=True)
    sub.where("id", 2)
    assert fragment.to_sql() == "NOT EXISTS (SELECT 1 FROM `salary` WHERE `name` = 'John')"
    assert fragment.bindings == ("John",)


# ---------------------------------------------------------------------------
# Clause families
# ---------------------------------------------------------------------------


class TestClauseFamilies:
    def test_from_with_alias(self):
        assert clauses.from_table("users", "u").to_sql() == "`users` AS `u`"

    def test_join_shapes(self):
        fragment = clauses.join(JoinType.INNER, "posts", "users.id", "=", "posts.user_id")
        assert fragment.to_sql() == "INNER JOIN `posts` ON `users`.`id` = `posts`.`user_id`"
        assert clauses.cross_join("comments").to_sql() == "CROSS JOIN `comments`"

    def test_invalid_direction(self):
        with pytest.raises(InvalidSortDirectionError):
            clauses.order_column("name", "SIDEWAYS")

    @pytest.mark.parametrize("value", [-1, "5", 2.5, True, None])
    def test_invalid_pagination(self, value):
        with pytest.raises(InvalidPaginationValueError) as exc_info:
            clauses.limit(value)
        assert exc_info.value.details["clause"] == "LIMIT"

    def test_insert_and_assignment_lists(self):
        values = {"name": "john", "address": "123 Taco Lane Ave St"}
        assert clauses.insert_values(values).to_sql() == (
            "(`name`, `address`) VALUES ('john', '123 Taco Lane Ave St')"
        )
        assert clauses.assignments(values).sql == "SET `name` = ?, `address` = ?"
