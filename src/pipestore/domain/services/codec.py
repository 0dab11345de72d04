"""Value codec between typed Python values and text fields.

Encoding rules per column type:

    int       base-10 text          <-> int
    float     decimal text          <-> float
    boolean   "true" / "false"      <-> bool (any other token is False)
    datetime  integer Unix seconds  <-> timezone-aware UTC datetime (naive values are refused)
    string    unchanged             <-> str

``None`` always encodes to the empty field and the empty field always
decodes to ``None``. For strings this means ``""`` and ``None`` collapse
into the same on-disk value.

Unparsable int/float fields decode to ``NaN`` unless the codec is strict.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pipestore.domain.value_objects import ColumnType
from pipestore.ports.inbound.record_store import FormatError

FIELD_SEPARATOR = "|"

_RESERVED = (FIELD_SEPARATOR, "\n", "\r")


class ValueCodec:
    """Encodes and decodes single fields for the five column types.

    Example:
        >>> codec = ValueCodec()
        >>> codec.encode(True, ColumnType.BOOLEAN)
        'true'
        >>> codec.decode("42", ColumnType.INT)
        42
        >>> codec.decode("", ColumnType.STRING) is None
        True
    """

    def __init__(self, strict_numbers: bool = False) -> None:
        """Initialize the codec.

        Args:
            strict_numbers: Raise FormatError on unparsable numbers instead
                of returning NaN.
        """
        self._strict_numbers = strict_numbers

    @property
    def strict_numbers(self) -> bool:
        return self._strict_numbers

    def decode(self, raw: str | None, column_type: ColumnType) -> Any:
        """Decode a raw field into a typed value, or None for empty input."""
        if raw is None or raw == "":
            return None

        if column_type is ColumnType.INT:
            return self._parse_number(raw, int, column_type)
        if column_type is ColumnType.FLOAT:
            return self._parse_number(raw, float, column_type)
        if column_type is ColumnType.BOOLEAN:
            return raw == "true"
        if column_type is ColumnType.DATETIME:
            seconds = self._parse_number(raw, int, column_type)
            if isinstance(seconds, float):
                # NaN sentinel from permissive parsing
                return None
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        return raw

    def encode(self, value: Any, column_type: ColumnType) -> str:
        """Encode a typed value into its field text.

        Raises:
            FormatError: If a string contains the separator or a line break,
                or a datetime is naive.
        """
        if value is None:
            return ""

        if column_type is ColumnType.BOOLEAN:
            return "true" if value else "false"
        if column_type is ColumnType.DATETIME:
            if isinstance(value, datetime):
                if value.utcoffset() is None:
                    raise FormatError(f"Naive datetime {value!r} has no timezone")
                return str(math.floor(value.timestamp()))
            return str(value)
        if column_type is ColumnType.INT:
            if isinstance(value, float) and value.is_integer():
                return str(int(value))
            return str(value)
        if column_type is ColumnType.FLOAT:
            return repr(float(value)) if isinstance(value, (int, float)) else str(value)

        text = value if isinstance(value, str) else str(value)
        if any(ch in text for ch in _RESERVED):
            raise FormatError(
                f"String value {text!r} contains '|' or a line break, which the format cannot store"
            )
        return text

    def decode_row(self, fields: list[str], columns: list) -> dict[str, Any]:
        """Decode a positional list of fields against a schema.

        Missing trailing fields decode to None; surplus fields are ignored.
        """
        return {
            column.name: self.decode(fields[i] if i < len(fields) else None, column.type)
            for i, column in enumerate(columns)
        }

    def encode_row(self, row: dict[str, Any], columns: list) -> str:
        """Encode a row positionally against a schema."""
        return FIELD_SEPARATOR.join(
            self.encode(row.get(column.name), column.type) for column in columns
        )

    def _parse_number(self, raw: str, kind: type, column_type: ColumnType) -> Any:
        try:
            return kind(raw.strip())
        except ValueError as e:
            if self._strict_numbers:
                raise FormatError(f"Cannot decode {raw!r} as {column_type.value}") from e
            return math.nan
