"""Table entity - a named schema with its rows and identifier counter.

Rows are plain dicts whose key set always equals the schema's column
names. Every path that writes a row goes through ``conform`` so extra
keys are dropped and missing keys are null-filled by construction.

A column literally named ``id`` gets special treatment: it drives
identifier allocation and upsert. Tables without one still support
predicate-based update and delete.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Mapping

from pipestore.domain.value_objects import Column, ColumnSpec, normalize_schema


@dataclass
class Table:
    """A table with an ordered schema, rows in storage order and ``last_id``.

    Invariant: ``last_id`` is at least the largest integer ``id`` in ``rows``.
    """

    name: str
    schema: list[Column]
    rows: list[dict[str, Any]] = field(default_factory=list)
    last_id: int = 0

    ID_COLUMN: ClassVar[str] = "id"

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.schema]

    @property
    def has_id_column(self) -> bool:
        return any(column.name == self.ID_COLUMN for column in self.schema)

    def conform(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Shape ``data`` to exactly the schema's columns."""
        return {name: data.get(name) for name in self.column_names}

    def find_by_id(self, row_id: Any) -> int:
        """Return the index of the first row with ``id == row_id``, or -1."""
        for index, row in enumerate(self.rows):
            if row.get(self.ID_COLUMN) == row_id:
                return index
        return -1

    def allocate_id(self, requested: Any) -> Any:
        """Resolve the identifier for an insert and advance ``last_id``.

        A falsy ``requested`` id allocates ``last_id + 1``. An explicit id
        above ``last_id`` moves ``last_id`` up to it. Ids are never handed
        out twice while this table object lives.
        """
        if not requested:
            self.last_id += 1
            return self.last_id
        if _is_int(requested) and requested > self.last_id:
            self.last_id = requested
        return requested

    def recompute_last_id(self) -> int:
        """Derive ``last_id`` from the largest integer ``id`` in the rows."""
        self.last_id = max(
            (int(row[self.ID_COLUMN]) for row in self.rows if _is_int(row.get(self.ID_COLUMN))),
            default=0,
        )
        return self.last_id

    def alter(self, schema: Iterable[ColumnSpec]) -> None:
        """Replace the schema and reshape every row to it.

        Retained columns are copied by name, new columns become None and
        dropped columns are discarded. No type coercion is attempted.
        """
        self.schema = normalize_schema(schema)
        self.rows = [self.conform(row) for row in self.rows]

    def snapshot(self) -> Table:
        """Return an independent deep copy."""
        return Table(
            name=self.name,
            schema=list(self.schema),
            rows=copy.deepcopy(self.rows),
            last_id=self.last_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "schema": [column.to_dict() for column in self.schema],
            "rows": [dict(row) for row in self.rows],
            "last_id": self.last_id,
        }


def _is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return not math.isnan(value) and value.is_integer()
    return isinstance(value, int)
