"""Domain entities for the record store.

Exports:
    Table:
        - Table: Named schema with rows and the ``last_id`` counter
"""

from pipestore.domain.entities.table import Table

__all__ = [
    "Table",
]
