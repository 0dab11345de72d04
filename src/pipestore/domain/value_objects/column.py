"""Column definitions and schema normalization.

A schema is an ordered list of columns. Order is significant: it is the
position at which each value is encoded in a data line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Union

TABLE_NAME_PATTERN = re.compile(r"^\w+$")
"""Table names are restricted to word characters so headers stay parseable."""

_FORBIDDEN_NAME_CHARS = ("|", ":", "\n", "\r")


class ColumnType(str, Enum):
    """Type tag of a column, as written in a table header."""

    INT = "int"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    STRING = "string"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Column:
    """A single ``name:type`` entry of a table schema.

    Example:
        >>> Column("id", ColumnType.INT).to_header()
        'id:int'
        >>> Column.from_header("name:string")
        Column(name='name', type=<ColumnType.STRING: 'string'>)
    """

    name: str
    type: ColumnType

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Column name must not be empty")
        if any(ch in self.name for ch in _FORBIDDEN_NAME_CHARS):
            raise ValueError(f"Column name contains a reserved character: {self.name!r}")
        if not isinstance(self.type, ColumnType):
            object.__setattr__(self, "type", ColumnType(self.type))

    def to_header(self) -> str:
        """Render as ``name:type`` for a table header line."""
        return f"{self.name}:{self.type.value}"

    @classmethod
    def from_header(cls, text: str) -> Column:
        """Parse a ``name:type`` header entry.

        Raises:
            ValueError: If the entry is malformed or names an unknown type.
        """
        column = cls.parse_header(text)
        if column is None:
            raise ValueError(f"Malformed column spec: {text!r}")
        return column

    @classmethod
    def parse_header(cls, text: str) -> Column | None:
        """Parse a ``name:type`` entry, or return None if it lacks a name or type.

        Raises:
            ValueError: If the type tag is unknown.
        """
        name, sep, type_tag = text.partition(":")
        if not sep or not name or not type_tag:
            return None
        return cls(name=name, type=ColumnType(type_tag))

    @classmethod
    def coerce(cls, spec: ColumnSpec) -> Column:
        """Build a column from any accepted schema entry form."""
        if isinstance(spec, Column):
            return spec
        if isinstance(spec, Mapping):
            return cls(name=spec["name"], type=ColumnType(spec["type"]))
        if isinstance(spec, tuple) and len(spec) == 2:
            return cls(name=spec[0], type=ColumnType(spec[1]))
        if isinstance(spec, str):
            return cls.from_header(spec)
        raise ValueError(f"Unsupported column spec: {spec!r}")

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type.value}


ColumnSpec = Union[Column, Mapping[str, Any], tuple, str]
"""Accepted forms for a schema entry: Column, mapping, (name, type) or 'name:type'."""


def normalize_schema(schema: Iterable[ColumnSpec]) -> list[Column]:
    """Normalize and validate a user-supplied schema.

    Raises:
        ValueError: If the schema is empty, has duplicate names or unknown types.
    """
    columns = [Column.coerce(spec) for spec in schema]
    if not columns:
        raise ValueError("Schema must contain at least one column")

    seen: set[str] = set()
    for column in columns:
        if column.name in seen:
            raise ValueError(f"Duplicate column name: {column.name}")
        seen.add(column.name)
    return columns


def validate_table_name(name: str) -> str:
    """Check that a table name can be written in a ``#TABLE`` header."""
    if not isinstance(name, str) or not TABLE_NAME_PATTERN.match(name):
        raise ValueError(f"Invalid table name: {name!r}")
    return name
