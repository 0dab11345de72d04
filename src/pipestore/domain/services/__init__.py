"""Domain services for the record store.

Exports:
    - ValueCodec: Typed value <-> text field conversion
    - validate_data: Runtime type checks against a schema
    - parse_document / serialize_document: The line-oriented file format
    - PersistenceEngine: Whole-file load, flush and reload
"""

from pipestore.domain.services.codec import FIELD_SEPARATOR, ValueCodec
from pipestore.domain.services.line_format import (
    ParsedDocument,
    format_table_header,
    parse_document,
    parse_table_header,
    serialize_document,
)
from pipestore.domain.services.persistence_engine import FlushResult, PersistenceEngine
from pipestore.domain.services.validation import validate_data

__all__ = [
    "FIELD_SEPARATOR",
    "ValueCodec",
    "ParsedDocument",
    "format_table_header",
    "parse_document",
    "parse_table_header",
    "serialize_document",
    "FlushResult",
    "PersistenceEngine",
    "validate_data",
]
