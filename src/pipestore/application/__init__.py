"""Application layer for the record store.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    Database:
        - Database: Main entry point, one instance per database file
        - create_database: Explicitly create a new authenticated file
    Query:
        - where: Equality predicate builder
        - SortDirection: asc / desc / rand
        - order_rows, limit_rows, relate_rows: Row-list helpers
"""

from pipestore.application.database import Database, create_database
from pipestore.application.query import (
    SortDirection,
    limit_rows,
    order_rows,
    relate_rows,
    where,
)

__all__ = [
    "Database",
    "create_database",
    "where",
    "SortDirection",
    "order_rows",
    "limit_rows",
    "relate_rows",
]
