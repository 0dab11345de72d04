"""
pipestore - Embedded single-file record store

A schema-typed table engine that keeps every table in one human-readable,
pipe-delimited text file and loads the whole file into memory on open.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"

from pipestore.application import Database, create_database, where
from pipestore.domain.entities import Table
from pipestore.domain.value_objects import Column, ColumnType, Credentials
from pipestore.ports.inbound import (
    AuthenticationError,
    DatabaseExistsError,
    FormatError,
    MissingAuthHeaderError,
    PipeStoreError,
    StorageIOError,
    TableAlreadyExistsError,
    TableNotFoundError,
    ValidationError,
)

__all__ = [
    "Database",
    "create_database",
    "where",
    "Table",
    "Column",
    "ColumnType",
    "Credentials",
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
