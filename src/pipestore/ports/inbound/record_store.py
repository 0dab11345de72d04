"""Record Store port - the programmatic surface offered to applications.

This inbound port defines the contract for a schema-typed table store
backed by a single text file. Every mutating operation is durable when it
returns: the whole file has been rewritten and the in-memory state has
been re-derived from it.

The error hierarchy shared by every layer lives here as well.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Iterable, Protocol, TypeVar

from pipestore.domain.value_objects import Column, ColumnSpec

T = TypeVar("T")

Row = dict[str, Any]
Predicate = Callable[[Row], bool]


class RecordStore(Protocol):
    """Protocol for the table-level CRUD and query API."""

    # --- Schema ---

    @abstractmethod
    def create_table(self, name: str, schema: Iterable[ColumnSpec]) -> None:
        """Create an empty table.

        Raises:
            TableAlreadyExistsError: If the name is taken.
            ValueError: If the name or schema is malformed.
        """
        ...

    @abstractmethod
    def drop_table(self, name: str) -> None:
        """Remove a table and all of its rows.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    @abstractmethod
    def alter_table(self, name: str, schema: Iterable[ColumnSpec]) -> None:
        """Replace a table's schema, reshaping every row to the new columns.

        Values of retained columns are copied by name, new columns are
        null-filled and dropped columns are discarded. No type coercion.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    @abstractmethod
    def has_table(self, name: str) -> bool:
        """Check whether a table exists."""
        ...

    @abstractmethod
    def list_tables(self) -> list[str]:
        """Return table names in storage order."""
        ...

    @abstractmethod
    def schema_of(self, name: str) -> list[Column]:
        """Return a table's schema.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        ...

    # --- Rows ---

    @abstractmethod
    def select(self, table: str, predicate: Predicate | None = None) -> list[Row]:
        """Return copies of the matching rows in storage order.

        A missing table yields an empty list rather than an error.
        """
        ...

    @abstractmethod
    def insert(self, table: str, data: Row) -> Row:
        """Insert a row, or merge into the row with the same ``id``.

        Returns:
            A copy of ``data`` with ``id`` filled in when one was allocated.

        Raises:
            TableNotFoundError: If the table does not exist.
            ValidationError: If a value does not match its column type.
        """
        ...

    @abstractmethod
    def update(self, table: str, predicate: Predicate, patch: Row) -> bool:
        """Merge ``patch`` into every matching row.

        Returns:
            True if at least one row matched (and the file was rewritten).
        """
        ...

    @abstractmethod
    def delete(self, table: str, predicate: Predicate) -> bool:
        """Remove every matching row.

        Returns:
            True if at least one row was removed (and the file was rewritten).
        """
        ...

    # --- Queries ---

    @abstractmethod
    def order_by(self, table: str, column: str, direction: str = "asc") -> list[Row]:
        """Return all rows sorted by ``column`` (asc, desc or rand)."""
        ...

    @abstractmethod
    def limit(self, rows: list[Row], count: int) -> list[Row]:
        """Return the first ``count`` rows of an already materialized list."""
        ...

    @abstractmethod
    def relate(
        self, from_table: str, from_key: str, to_table: str, to_key: str
    ) -> list[Row]:
        """Attach the first related row's leading column value to each row."""
        ...

    # --- Escape hatch ---

    @abstractmethod
    def raw(self, callback: Callable[[dict[str, Any]], T]) -> T:
        """Run ``callback`` against the live table mapping. Never persists."""
        ...

    @abstractmethod
    def flush(self) -> None:
        """Persist the current in-memory state."""
        ...

    @abstractmethod
    def to_json(self) -> str:
        """Dump every table as indented JSON."""
        ...


class PipeStoreError(Exception):
    """Base class for every record store error."""


class TableNotFoundError(PipeStoreError):
    """Raised when an operation names a table that does not exist."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table not found: {table}")


class TableAlreadyExistsError(PipeStoreError):
    """Raised when creating a table whose name is taken."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table already exists: {table}")


class ValidationError(PipeStoreError, ValueError):
    """Raised when a supplied value does not match its column type."""

    def __init__(self, column: str, expected_type: str) -> None:
        self.column = column
        self.expected_type = expected_type
        super().__init__(f"Invalid value for column '{column}': expected {expected_type}")


class AuthenticationError(PipeStoreError):
    """Raised when supplied credentials do not match the file's auth header."""


class MissingAuthHeaderError(AuthenticationError):
    """Raised when credentials are supplied but the file has no auth header."""


class StorageIOError(PipeStoreError):
    """Raised when reading or writing the database file fails."""


class DatabaseExistsError(PipeStoreError):
    """Raised when explicitly creating a database over an existing file."""


class FormatError(PipeStoreError):
    """Raised when a value or line cannot be expressed in the text format."""
