"""Shared pytest fixtures for fluentql unit and integration tests."""
from __future__ import annotations

import pytest

from fluentql import Query
from tests.fixtures import RecordingDatabase


@pytest.fixture()
def db() -> RecordingDatabase:
    """Database double with no rows."""
    return RecordingDatabase()


@pytest.fixture()
def full_query() -> Query:
    """A query touching every clause, built out of clause order."""
    return (
        Query("my_table")
        .offset(5)
        .order_by("id")
        .where("name", "John")
        .having("class", "LIKE", "%example%")
        .select("id", "name")
        .limit(2)
        .group_by("class")
        .left_join("comments", "my_table.id", "=", "comments.my_table_id")
    )
