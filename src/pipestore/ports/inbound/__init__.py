"""Inbound ports - APIs offered to applications."""

from pipestore.ports.inbound.record_store import (
    AuthenticationError,
    DatabaseExistsError,
    FormatError,
    MissingAuthHeaderError,
    PipeStoreError,
    Predicate,
    RecordStore,
    Row,
    StorageIOError,
    TableAlreadyExistsError,
    TableNotFoundError,
    ValidationError,
)

__all__ = [
    "RecordStore",
    "Row",
    "Predicate",
    "PipeStoreError",
    "TableNotFoundError",
    "TableAlreadyExistsError",
    "ValidationError",
    "AuthenticationError",
    "MissingAuthHeaderError",
    "StorageIOError",
    "DatabaseExistsError",
    "FormatError",
]
