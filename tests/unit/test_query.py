"""Unit tests for row-list query helpers."""

from __future__ import annotations

import random

import pytest

from pipestore.application.query import (
    SortDirection,
    limit_rows,
    order_rows,
    relate_rows,
    where,
)


@pytest.mark.unit
class TestOrderRows:
    """Tests for order_rows."""

    @pytest.fixture
    def rows(self) -> list[dict]:
        return [{"name": "b"}, {"name": "a"}, {"name": "c"}]

    def test_desc(self, rows: list[dict]) -> None:
        assert [r["name"] for r in order_rows(rows, "name", "desc")] == ["c", "b", "a"]

    def test_asc(self, rows: list[dict]) -> None:
        assert [r["name"] for r in order_rows(rows, "name", "asc")] == ["a", "b", "c"]

    def test_stable_ties(self) -> None:
        rows = [{"k": 1, "n": "x"}, {"k": 0, "n": "y"}, {"k": 1, "n": "z"}]
        assert [r["n"] for r in order_rows(rows, "k", SortDirection.ASC)] == ["y", "x", "z"]

    def test_none_sorts_first(self) -> None:
        rows = [{"k": 2}, {"k": None}, {"k": 1}]
        assert [r["k"] for r in order_rows(rows, "k")] == [None, 1, 2]
        assert [r["k"] for r in order_rows(rows, "k", "desc")] == [2, 1, None]

    def test_rand_is_permutation(self, rows: list[dict]) -> None:
        shuffled = order_rows(rows, "name", "rand", rng=random.Random(7))
        assert sorted(r["name"] for r in shuffled) == ["a", "b", "c"]

    def test_does_not_mutate_input(self, rows: list[dict]) -> None:
        result = order_rows(rows, "name")
        result[0]["name"] = "z"
        assert [r["name"] for r in rows] == ["b", "a", "c"]

    def test_unknown_direction(self, rows: list[dict]) -> None:
        with pytest.raises(ValueError):
            order_rows(rows, "name", "sideways")


@pytest.mark.unit
class TestLimitRows:
    """Tests for limit_rows."""

    def test_limit(self) -> None:
        assert limit_rows([1, 2, 3], 2) == [1, 2]  # type: ignore[list-item]

    def test_limit_larger_than_rows(self) -> None:
        assert limit_rows([1, 2], 10) == [1, 2]  # type: ignore[list-item]

    def test_limit_zero(self) -> None:
        assert limit_rows([1, 2], 0) == []  # type: ignore[list-item]

    def test_negative(self) -> None:
        with pytest.raises(ValueError):
            limit_rows([], -1)


@pytest.mark.unit
class TestRelateRows:
    """Tests for relate_rows."""

    def test_first_match_only(self) -> None:
        posts = [{"id": 1, "author": 10}, {"id": 2, "author": 99}]
        users = [
            {"name": "Ann", "uid": 10},
            {"name": "Annie", "uid": 10},
        ]

        result = relate_rows(posts, "author", users, "uid", field_name="users", value_column="name")

        assert result == [
            {"id": 1, "author": 10, "users": "Ann"},
            {"id": 2, "author": 99, "users": None},
        ]
        assert "users" not in posts[0]


@pytest.mark.unit
class TestWhere:
    """Tests for the where() predicate builder."""

    def test_all_conditions_must_match(self) -> None:
        predicate = where(name="John", isAdmin=True)
        assert predicate({"name": "John", "isAdmin": True})
        assert not predicate({"name": "John", "isAdmin": False})

    def test_no_conditions_matches_everything(self) -> None:
        assert where()({"anything": 1})
