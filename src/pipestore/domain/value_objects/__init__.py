"""Value objects for the record store.

Value objects are immutable and compared by value.

Exports:
    Column:
        - ColumnType: Type tag enumeration (int, float, boolean, datetime, string)
        - Column: A ``name:type`` schema entry
        - ColumnSpec: Accepted input forms for a schema entry
        - normalize_schema: Validate and normalize a schema
        - validate_table_name: Check a table name is header-safe

    Credentials:
        - Credentials: Username/password pair from the auth header
        - AUTH_PREFIX: Marker of the auth header line
"""

from pipestore.domain.value_objects.column import (
    TABLE_NAME_PATTERN,
    Column,
    ColumnSpec,
    ColumnType,
    normalize_schema,
    validate_table_name,
)
from pipestore.domain.value_objects.credentials import AUTH_PREFIX, Credentials

__all__ = [
    # Column
    "TABLE_NAME_PATTERN",
    "Column",
    "ColumnSpec",
    "ColumnType",
    "normalize_schema",
    "validate_table_name",
    # Credentials
    "AUTH_PREFIX",
    "Credentials",
]
