"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (RecordStore)
- Outbound ports: Dependencies on external systems (FileStore)

Adapters implement these ports with concrete functionality.
"""

from pipestore.ports.inbound import (
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
from pipestore.ports.outbound import FileStore

__all__ = [
    # Inbound ports
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
    # Outbound ports
    "FileStore",
]
