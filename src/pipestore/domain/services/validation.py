"""Runtime type validation of row data against a schema."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from pipestore.domain.value_objects import Column, ColumnType
from pipestore.ports.inbound.record_store import ValidationError


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_aware_datetime(value: Any) -> bool:
    # Naive values have no fixed instant to store as Unix seconds.
    return isinstance(value, datetime) and value.utcoffset() is not None


_CHECKS = {
    ColumnType.INT: _is_int,
    ColumnType.FLOAT: _is_number,
    ColumnType.BOOLEAN: lambda value: isinstance(value, bool),
    ColumnType.DATETIME: _is_aware_datetime,
}


def validate_data(schema: list[Column], data: Mapping[str, Any]) -> None:
    """Check every supplied, non-null value against its column type.

    String columns accept anything. Columns missing from ``data`` and keys
    that are not columns are not checked.

    Raises:
        ValidationError: On the first value whose type does not match.
    """
    for column in schema:
        value = data.get(column.name)
        if value is None:
            continue
        check = _CHECKS.get(column.type)
        if check is not None and not check(value):
            raise ValidationError(column.name, column.type.value)
