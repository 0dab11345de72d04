"""Line-oriented file format.

File layout (UTF-8 text, one record per line):

    #AUTH|username:<u>|password:<p>          optional, line 0 only
    #TABLE <name>|<col>:<type>|<col>:<type>...
    <value>|<value>...                       data lines for that table
    #TABLE <name2>|...

Parsing rules:
    - Blank lines are skipped.
    - Lines before the first ``#TABLE`` header are ignored.
    - A header whose name is not a word is skipped, as are its data lines.
    - Column specs without a name or type are dropped; unknown type tags
      are a FormatError.
    - ``last_id`` is never stored; it is derived from the rows after parsing.

A data line that would read back as a header or a blank line cannot be
written; serialization rejects it with FormatError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pipestore.domain.entities import Table
from pipestore.domain.services.codec import FIELD_SEPARATOR, ValueCodec
from pipestore.domain.value_objects import AUTH_PREFIX, Column, Credentials
from pipestore.ports.inbound.record_store import FormatError

TABLE_PREFIX = "#TABLE"

_TABLE_HEADER = re.compile(r"^#TABLE\s+(\w+)")


@dataclass
class ParsedDocument:
    """Result of parsing a database file."""

    tables: dict[str, Table] = field(default_factory=dict)
    credentials: Credentials | None = None
    has_auth_header: bool = False


def parse_table_header(line: str) -> Table | None:
    """Parse a ``#TABLE`` line into an empty table, or None if unnamed."""
    parts = line.split(FIELD_SEPARATOR)
    match = _TABLE_HEADER.match(parts[0])
    if not match:
        return None

    schema: list[Column] = []
    for spec in parts[1:]:
        try:
            column = Column.parse_header(spec)
        except ValueError as e:
            raise FormatError(f"Bad column spec {spec!r} in table {match.group(1)}") from e
        if column is not None:
            schema.append(column)

    return Table(name=match.group(1), schema=schema)


def format_table_header(table: Table) -> str:
    columns = FIELD_SEPARATOR.join(column.to_header() for column in table.schema)
    return f"{TABLE_PREFIX} {table.name}|{columns}"


def parse_document(lines: list[str], codec: ValueCodec) -> ParsedDocument:
    """Parse every line of a database file.

    Raises:
        FormatError: If the auth header or a column spec is malformed.
    """
    document = ParsedDocument()
    body = lines

    if lines and lines[0].startswith(AUTH_PREFIX):
        try:
            document.credentials = Credentials.from_header(lines[0].rstrip())
        except ValueError as e:
            raise FormatError(f"Malformed auth header: {e}") from e
        document.has_auth_header = True
        body = lines[1:]

    current: Table | None = None
    for line in body:
        if not line.strip():
            continue

        if line.startswith(TABLE_PREFIX):
            current = parse_table_header(line)
            if current is not None:
                document.tables[current.name] = current
            continue

        if current is None:
            continue

        current.rows.append(codec.decode_row(line.split(FIELD_SEPARATOR), current.schema))

    for table in document.tables.values():
        table.recompute_last_id()

    return document


def serialize_document(
    tables: dict[str, Table],
    codec: ValueCodec,
    credentials: Credentials | None = None,
) -> list[str]:
    """Serialize tables (and the auth header, if any) into file lines.

    Raises:
        FormatError: If a value cannot be encoded, or a row would read back
            as a table header or a blank line.
    """
    lines: list[str] = []
    if credentials is not None:
        lines.append(credentials.to_header())

    for table in tables.values():
        lines.append(format_table_header(table))
        for row in table.rows:
            line = codec.encode_row(row, table.schema)
            if line.startswith(TABLE_PREFIX):
                raise FormatError(
                    f"Row in table {table.name} starts with {TABLE_PREFIX!r} and would read back as a header"
                )
            if not line.strip():
                raise FormatError(
                    f"Row in table {table.name} encodes to a blank line and would be lost on reload"
                )
            lines.append(line)

    return lines
