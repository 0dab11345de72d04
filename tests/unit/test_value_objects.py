"""Unit tests for column and credential value objects."""

from __future__ import annotations

import pytest

from pipestore.domain.value_objects import (
    Column,
    ColumnType,
    Credentials,
    normalize_schema,
    validate_table_name,
)


@pytest.mark.unit
class TestColumn:
    """Tests for Column."""

    def test_header_round_trip(self) -> None:
        column = Column("isAdmin", ColumnType.BOOLEAN)
        assert column.to_header() == "isAdmin:boolean"
        assert Column.from_header("isAdmin:boolean") == column

    def test_type_coerced_from_string(self) -> None:
        assert Column("id", "int").type is ColumnType.INT  # type: ignore[arg-type]

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            Column.from_header("id:integer")

    @pytest.mark.parametrize("text", ["broken", ":string", "name:"])
    def test_parse_header_incomplete(self, text: str) -> None:
        assert Column.parse_header(text) is None
        with pytest.raises(ValueError, match="Malformed"):
            Column.from_header(text)

    def test_parse_header_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            Column.parse_header("id:uuid")

    @pytest.mark.parametrize("name", ["", "a|b", "a:b", "a\nb"])
    def test_reserved_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            Column(name, ColumnType.STRING)

    def test_coerce_forms(self) -> None:
        """Columns can be given as Column, tuple, mapping or header text."""
        expected = Column("name", ColumnType.STRING)
        assert Column.coerce(expected) is expected
        assert Column.coerce(("name", "string")) == expected
        assert Column.coerce({"name": "name", "type": "string"}) == expected
        assert Column.coerce("name:string") == expected

    def test_immutable(self) -> None:
        column = Column("id", ColumnType.INT)
        with pytest.raises(AttributeError):
            column.name = "other"  # type: ignore[misc]


@pytest.mark.unit
class TestSchema:
    """Tests for schema normalization."""

    def test_order_preserved(self) -> None:
        schema = normalize_schema([("b", "int"), ("a", "string")])
        assert [c.name for c in schema] == ["b", "a"]

    def test_empty_schema(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            normalize_schema([])

    def test_duplicate_columns(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            normalize_schema([("a", "int"), ("a", "string")])

    @pytest.mark.parametrize("name", ["users", "user_roles", "T1"])
    def test_valid_table_names(self, name: str) -> None:
        assert validate_table_name(name) == name

    @pytest.mark.parametrize("name", ["", "my table", "a|b", "a-b"])
    def test_invalid_table_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            validate_table_name(name)


@pytest.mark.unit
class TestCredentials:
    """Tests for Credentials."""

    def test_header_round_trip(self) -> None:
        credentials = Credentials("admin", "s3cr:et")
        header = credentials.to_header()

        assert header == "#AUTH|username:admin|password:s3cr:et"
        assert Credentials.from_header(header) == credentials

    def test_matches(self) -> None:
        assert Credentials("a", "b").matches(Credentials("a", "b"))
        assert not Credentials("a", "b").matches(Credentials("a", "c"))
        assert not Credentials("a", "b").matches(Credentials("x", "b"))

    def test_header_missing_field(self) -> None:
        with pytest.raises(ValueError):
            Credentials.from_header("#AUTH|username:admin")

    def test_not_an_auth_header(self) -> None:
        with pytest.raises(ValueError):
            Credentials.from_header("#TABLE users|id:int")

    def test_reserved_characters(self) -> None:
        with pytest.raises(ValueError):
            Credentials("ad|min", "pw")

    def test_from_pair(self) -> None:
        assert Credentials.from_pair(None, None) is None
        assert Credentials.from_pair("u", "p") == Credentials("u", "p")
        with pytest.raises(ValueError, match="together"):
            Credentials.from_pair("u", None)

    def test_password_hidden_in_repr(self) -> None:
        assert "hunter2" not in repr(Credentials("u", "hunter2"))
