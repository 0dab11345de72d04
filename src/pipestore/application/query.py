"""Query helpers operating on materialized rows.

These functions never touch storage: they take rows that were already
read out of a table and return new lists of row copies.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Any, Callable, Iterable

Row = dict[str, Any]


class SortDirection(str, Enum):
    """Ordering direction accepted by ``order_rows``."""

    ASC = "asc"
    DESC = "desc"
    RAND = "rand"


def where(**conditions: Any) -> Callable[[Row], bool]:
    """Build a predicate matching rows whose fields equal ``conditions``.

    Example:
        >>> admins = where(isAdmin=True)
        >>> admins({"name": "John", "isAdmin": True})
        True
    """

    def predicate(row: Row) -> bool:
        return all(row.get(key) == value for key, value in conditions.items())

    predicate.__name__ = "where(" + ", ".join(f"{k}={v!r}" for k, v in conditions.items()) + ")"
    return predicate


def order_rows(
    rows: Iterable[Row],
    column: str,
    direction: str | SortDirection = SortDirection.ASC,
    rng: random.Random | None = None,
) -> list[Row]:
    """Sort rows by ``column``.

    ``asc`` and ``desc`` are stable; None values sort before everything
    else in ``asc`` (and after in ``desc``). ``rand`` is a uniform shuffle.

    Raises:
        ValueError: If ``direction`` is not asc, desc or rand.
    """
    direction = SortDirection(direction)
    result = [dict(row) for row in rows]

    if direction is SortDirection.RAND:
        (rng or random).shuffle(result)
        return result

    def sort_key(row: Row) -> tuple[bool, Any]:
        value = row.get(column)
        return (value is not None, value)

    result.sort(key=sort_key, reverse=direction is SortDirection.DESC)
    return result


def limit_rows(rows: list[Row], count: int) -> list[Row]:
    """Return the first ``count`` rows.

    Raises:
        ValueError: If ``count`` is negative.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return rows[:count]


def relate_rows(
    rows: Iterable[Row],
    from_key: str,
    related: list[Row],
    to_key: str,
    field_name: str,
    value_column: str,
) -> list[Row]:
    """Attach one related value per row.

    For each row, the first row in ``related`` whose ``to_key`` equals the
    row's ``from_key`` supplies its ``value_column`` under ``field_name``.
    Rows without a match get None. There is no fan-out.
    """
    result = []
    for row in rows:
        match = next((r for r in related if r.get(to_key) == row.get(from_key)), None)
        joined = dict(row)
        joined[field_name] = match.get(value_column) if match is not None else None
        result.append(joined)
    return result
