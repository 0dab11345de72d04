"""Persistence Engine - whole-file load, flush and reload.

The engine owns the translation between the backing file and the
in-memory table mapping. It never mutates the mapping it is given to
save: on success it returns a freshly loaded mapping that the caller
installs as the new live state. On failure the caller's state is
untouched, so memory never runs ahead of disk.

Flush cycle:
    1. Serialize every table (and the auth header) into lines
    2. Atomically replace the file
    3. Re-read and re-parse the file (unless reload is disabled)
    4. Carry ``last_id`` forward so reload never lowers it
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from pipestore.domain.entities import Table
from pipestore.domain.services.codec import ValueCodec
from pipestore.domain.services.line_format import (
    ParsedDocument,
    parse_document,
    serialize_document,
)
from pipestore.domain.value_objects import Credentials
from pipestore.infrastructure.logging import get_logger
from pipestore.infrastructure.metrics import MetricsRegistry
from pipestore.infrastructure.tracing import trace_span
from pipestore.ports.outbound import FileStore

logger = get_logger(__name__)


@dataclass
class FlushResult:
    """Outcome of a flush."""

    tables: dict[str, Table]
    bytes_written: int
    reloaded: bool


class PersistenceEngine:
    """Loads and saves the whole database through a FileStore."""

    def __init__(
        self,
        file_store: FileStore,
        codec: ValueCodec,
        metrics: MetricsRegistry | None = None,
        reload_after_write: bool = True,
    ) -> None:
        self._store = file_store
        self._codec = codec
        self._metrics = metrics
        self._reload_after_write = reload_after_write

    @property
    def file_store(self) -> FileStore:
        return self._store

    @property
    def reload_after_write(self) -> bool:
        return self._reload_after_write

    def load(self) -> ParsedDocument:
        """Read and parse the whole file.

        Raises:
            StorageIOError: If the file cannot be read.
            FormatError: If the file content is malformed.
        """
        with trace_span("pipestore.load", {"path": str(self._store.path)}):
            document = parse_document(self._store.read_lines(), self._codec)

        if self._metrics is not None:
            for table in document.tables.values():
                self._metrics.rows.labels(table=table.name).set(len(table.rows))

        logger.debug(
            "database_loaded",
            path=str(self._store.path),
            tables=len(document.tables),
        )
        return document

    def initialize(self, credentials: Credentials | None) -> None:
        """Create the file holding only the auth header (if any).

        Raises:
            FileExistsError: If the file already exists.
        """
        lines = [credentials.to_header()] if credentials is not None else []
        self._store.create(lines)
        logger.info(
            "database_created",
            path=str(self._store.path),
            authenticated=credentials is not None,
        )

    def save(
        self,
        tables: dict[str, Table],
        credentials: Credentials | None = None,
    ) -> FlushResult:
        """Write ``tables`` to disk and return the state now on disk.

        Raises:
            FormatError: If a value cannot be encoded. Nothing is written.
            StorageIOError: If the write or the reload fails.
        """
        start = time.perf_counter()
        with trace_span("pipestore.flush", {"path": str(self._store.path)}):
            lines = serialize_document(tables, self._codec, credentials)
            bytes_written = self._store.write_lines(lines)

        if self._metrics is not None:
            self._metrics.flushes_total.inc()
            self._metrics.flush_latency_seconds.observe(time.perf_counter() - start)
            self._metrics.file_size_bytes.set(bytes_written)

        logger.debug(
            "database_flushed",
            path=str(self._store.path),
            tables=len(tables),
            bytes=bytes_written,
        )

        if not self._reload_after_write:
            return FlushResult(tables=tables, bytes_written=bytes_written, reloaded=False)

        reloaded = self.load().tables
        for name, table in reloaded.items():
            previous = tables.get(name)
            if previous is not None and previous.last_id > table.last_id:
                table.last_id = previous.last_id

        return FlushResult(tables=reloaded, bytes_written=bytes_written, reloaded=True)
