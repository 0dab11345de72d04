"""Database - unified entry point for the record store.

This module provides the Database class that opens (or creates) a
database file, checks its credentials and serves every CRUD and query
operation against the in-memory tables.

Usage:
    from pipestore import Database, where

    with Database("app.pdb", username="admin", password="secret") as db:
        db.create_table("users", [("id", "int"), ("name", "string"), ("isAdmin", "boolean")])
        db.insert("users", {"name": "John", "isAdmin": True})
        admins = db.select("users", where(isAdmin=True))

Mutation model:
    Every mutating operation works on a snapshot of the tables, hands it to
    the PersistenceEngine and installs the state read back from disk only
    once the flush succeeded. A failed write leaves the live tables exactly
    as they were.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, TypeVar

from pipestore.adapters.outbound import TextFileStore
from pipestore.application.query import limit_rows, order_rows, relate_rows
from pipestore.domain.entities import Table
from pipestore.domain.services import PersistenceEngine, ValueCodec, validate_data
from pipestore.domain.services.line_format import ParsedDocument
from pipestore.domain.value_objects import (
    Column,
    ColumnSpec,
    Credentials,
    normalize_schema,
    validate_table_name,
)
from pipestore.infrastructure.config import Config, get_config
from pipestore.infrastructure.logging import get_logger
from pipestore.infrastructure.metrics import MetricsRegistry, get_metrics
from pipestore.ports.inbound.record_store import (
    AuthenticationError,
    DatabaseExistsError,
    MissingAuthHeaderError,
    Predicate,
    Row,
    TableAlreadyExistsError,
    TableNotFoundError,
)

T = TypeVar("T")


class Database:
    """A single-file, schema-typed record store held entirely in memory.

    The file is the source of truth: every mutation rewrites it completely
    and reloads it, so what the caller sees afterwards is exactly what a
    fresh open would see.

    Thread Safety:
        None. One Database instance per file, used from one thread.
    """

    def __init__(
        self,
        path: str | Path,
        username: str | None = None,
        password: str | None = None,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Open the database at ``path``, creating it if missing.

        Args:
            path: Database file path.
            username: Username for authenticated files.
            password: Password for authenticated files.
            config: Configuration (default from environment).
            metrics: Metrics registry (default process-wide registry).

        Raises:
            ValueError: If only one of username/password is given.
            AuthenticationError: If the credentials do not match the file.
            MissingAuthHeaderError: If credentials are given but the file has none.
            StorageIOError: If the file cannot be read or created.
            FormatError: If the file content is malformed.
        """
        self._config = config or get_config()
        self._metrics = metrics or get_metrics()
        self._credentials = Credentials.from_pair(username, password)

        storage = self._config.storage
        store = TextFileStore(path, encoding=storage.encoding, sync_mode=storage.sync_mode)
        self._persistence = PersistenceEngine(
            file_store=store,
            codec=ValueCodec(strict_numbers=self._config.codec.strict_numbers),
            metrics=self._metrics,
            reload_after_write=storage.reload_after_write,
        )

        self._logger = get_logger(__name__, path=str(store.path))
        self._verbose = self._config.observability.verbose_operations
        self._tables: dict[str, Table] = {}
        self._version = 0

        self._open()

    # --- Lifecycle ---

    @property
    def path(self) -> Path:
        """Get the database file path."""
        return self._persistence.file_store.path

    @property
    def version(self) -> int:
        """Number of successful commits since open."""
        return self._version

    @property
    def is_authenticated(self) -> bool:
        return self._credentials is not None

    def _open(self) -> None:
        if not self._persistence.file_store.exists():
            try:
                self._persistence.initialize(self._credentials)
            except FileExistsError:
                pass

        document = self._persistence.load()
        self._authenticate(document)
        self._tables = document.tables
        self._logger.info(
            "database_opened",
            tables=len(self._tables),
            authenticated=self._credentials is not None,
        )

    def _authenticate(self, document: ParsedDocument) -> None:
        if self._credentials is None:
            if document.has_auth_header:
                raise AuthenticationError("Database requires credentials")
            return

        if not document.has_auth_header or document.credentials is None:
            raise MissingAuthHeaderError(f"No auth header in {self.path}")
        if not self._credentials.matches(document.credentials):
            self._logger.warning("authentication_failed", username=self._credentials.username)
            raise AuthenticationError("Invalid username or password")

    def reload(self) -> None:
        """Discard in-memory state and re-read the file."""
        self._tables = self._persistence.load().tables

    def close(self) -> None:
        """Close the database. Every mutation is already on disk."""
        self._logger.info("database_closed", version=self._version)

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Database(path={str(self.path)!r}, tables={list(self._tables)!r})"

    # --- Operation logging ---

    def enable_log(self) -> None:
        """Log every operation with the rows it produced or touched."""
        self._verbose = True

    def disable_log(self) -> None:
        self._verbose = False

    @property
    def log_enabled(self) -> bool:
        return self._verbose

    def _log_operation(self, operation: str, description: str, data: Any = None) -> None:
        if not self._verbose:
            return
        if isinstance(data, list):
            self._logger.info(
                "operation", operation=operation, description=description,
                count=len(data), rows=data,
            )
        elif data is not None:
            self._logger.info(
                "operation", operation=operation, description=description, data=data
            )
        else:
            self._logger.info("operation", operation=operation, description=description)

    @contextmanager
    def _track(self, operation: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        except Exception:
            self._metrics.operations_total.labels(operation=operation, status="error").inc()
            raise
        else:
            self._metrics.operations_total.labels(operation=operation, status="success").inc()
        finally:
            self._metrics.operation_latency_seconds.labels(operation=operation).observe(
                time.perf_counter() - start
            )

    # --- Commit ---

    def _snapshot(self) -> dict[str, Table]:
        return {name: table.snapshot() for name, table in self._tables.items()}

    def _commit(self, tables: dict[str, Table]) -> None:
        result = self._persistence.save(tables, self._credentials)
        self._tables = result.tables
        self._version += 1

    @staticmethod
    def _require(tables: dict[str, Table], name: str) -> Table:
        table = tables.get(name)
        if table is None:
            raise TableNotFoundError(name)
        return table

    def flush(self) -> None:
        """Persist the current in-memory state, e.g. after ``raw`` mutations."""
        with self._track("flush"):
            self._commit(self._tables)

    # --- Schema ---

    def create_table(self, name: str, schema: Iterable[ColumnSpec]) -> None:
        with self._track("create_table"):
            validate_table_name(name)
            columns = normalize_schema(schema)
            if name in self._tables:
                raise TableAlreadyExistsError(name)

            tables = self._snapshot()
            tables[name] = Table(name=name, schema=columns)
            self._commit(tables)

        self._logger.debug("table_created", table=name, columns=len(columns))
        self._log_operation(
            "create_table", f"Table '{name}' created", [c.to_dict() for c in columns]
        )

    def drop_table(self, name: str) -> None:
        with self._track("drop_table"):
            tables = self._snapshot()
            self._require(tables, name)
            del tables[name]
            self._commit(tables)

        self._logger.debug("table_dropped", table=name)
        self._log_operation("drop_table", f"Table '{name}' deleted")

    def alter_table(self, name: str, schema: Iterable[ColumnSpec]) -> None:
        with self._track("alter_table"):
            tables = self._snapshot()
            table = self._require(tables, name)
            table.alter(schema)
            self._commit(tables)

        self._log_operation(
            "alter_table",
            f"Table structure '{name}' changed",
            [c.to_dict() for c in self._tables[name].schema],
        )

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def list_tables(self) -> list[str]:
        return list(self._tables)

    def schema_of(self, name: str) -> list[Column]:
        return list(self._require(self._tables, name).schema)

    # --- Rows ---

    def _rows(self, table: str, predicate: Predicate | None = None) -> list[Row]:
        tbl = self._tables.get(table)
        if tbl is None:
            # Missing tables read as empty; every other operation raises.
            self._logger.warning("select_missing_table", table=table)
            return []
        rows = [dict(row) for row in tbl.rows]
        if predicate is None:
            return rows
        return [row for row in rows if predicate(row)]

    def select(self, table: str, predicate: Predicate | None = None) -> list[Row]:
        """Return copies of the rows matching ``predicate`` (all if None)."""
        with self._track("select"):
            result = self._rows(table, predicate)
        self._log_operation("select", f"Fetch data from table '{table}'", result)
        return result

    def insert(self, table: str, data: Row) -> Row:
        """Insert ``data`` as a new row, or merge it into the row with its id.

        A missing or falsy ``id`` gets ``last_id + 1``; an explicit id above
        ``last_id`` advances it. If a row with the resulting id exists, the
        supplied fields override that row's values and the rest are kept.

        Returns:
            A copy of ``data`` including the resolved ``id``.
        """
        with self._track("insert"):
            tables = self._snapshot()
            tbl = self._require(tables, table)
            validate_data(tbl.schema, data)

            result = dict(data)
            index = -1
            if tbl.has_id_column:
                result[Table.ID_COLUMN] = tbl.allocate_id(data.get(Table.ID_COLUMN))
                index = tbl.find_by_id(result[Table.ID_COLUMN])

            if index >= 0:
                tbl.rows[index] = tbl.conform({**tbl.rows[index], **result})
                description = f"Update data in '{table}' with id={result[Table.ID_COLUMN]}"
            else:
                tbl.rows.append(tbl.conform(result))
                description = f"Add new data to '{table}'"

            self._commit(tables)

        self._log_operation("insert", description, result)
        return result

    def update(self, table: str, predicate: Predicate, patch: Row) -> bool:
        """Merge ``patch`` into every row matching ``predicate``.

        Keys of ``patch`` that are not columns are ignored.

        Returns:
            True if at least one row matched and the change was persisted.
        """
        with self._track("update"):
            tables = self._snapshot()
            tbl = self._require(tables, table)
            validate_data(tbl.schema, patch)

            changes = {key: value for key, value in patch.items() if key in tbl.column_names}
            matched = 0
            for row in tbl.rows:
                if predicate(row):
                    row.update(changes)
                    matched += 1

            if matched:
                self._commit(tables)

        if matched:
            self._log_operation(
                "update", f"Update data in '{table}' based on condition ({matched} rows)", patch
            )
        return matched > 0

    def delete(self, table: str, predicate: Predicate) -> bool:
        """Remove every row matching ``predicate``.

        Returns:
            True if at least one row was removed and the change was persisted.
        """
        with self._track("delete"):
            tables = self._snapshot()
            tbl = self._require(tables, table)

            kept: list[Row] = []
            removed: list[Row] = []
            for row in tbl.rows:
                (removed if predicate(row) else kept).append(row)
            if removed:
                tbl.rows = kept
                self._commit(tables)

        if removed:
            self._log_operation("delete", f"Delete data from '{table}'", removed)
        return bool(removed)

    # --- Queries ---

    def order_by(self, table: str, column: str, direction: str = "asc") -> list[Row]:
        """Return all rows of ``table`` sorted by ``column``.

        Args:
            direction: 'asc', 'desc' or 'rand'.

        Raises:
            ValueError: On an unknown direction.
        """
        with self._track("order_by"):
            result = order_rows(self._rows(table), column, direction)
        self._log_operation(
            "order_by", f"Sort '{table}' by column '{column}' ({direction})", result
        )
        return result

    def limit(self, rows: list[Row], count: int) -> list[Row]:
        result = limit_rows(rows, count)
        self._log_operation("limit", f"Limit to {count} results", result)
        return result

    def relate(
        self, from_table: str, from_key: str, to_table: str, to_key: str
    ) -> list[Row]:
        """Attach to each ``from_table`` row the first related ``to_table`` row.

        The attached value is the related row's first schema column, stored
        under a field named ``to_table``.

        Raises:
            TableNotFoundError: If either table does not exist.
        """
        with self._track("relate"):
            source = self._require(self._tables, from_table)
            target = self._require(self._tables, to_table)
            value_column = target.schema[0].name if target.schema else to_key
            result = relate_rows(
                (dict(row) for row in source.rows),
                from_key,
                target.rows,
                to_key,
                field_name=to_table,
                value_column=value_column,
            )

        self._log_operation(
            "relate", f"Relation {from_table}.{from_key} -> {to_table}.{to_key}", result
        )
        return result

    # --- Escape hatches ---

    def raw(self, callback: Callable[[dict[str, Table]], T]) -> T:
        """Call ``callback`` with the live table mapping and return its result.

        Nothing is validated and nothing is persisted: call ``flush()``
        after mutating tables this way.
        """
        with self._track("raw"):
            result = callback(self._tables)
        self._log_operation("raw", "Raw query executed", result)
        return result

    @contextmanager
    def unsafe_tables(self) -> Iterator[dict[str, Table]]:
        """Yield a mutable snapshot of every table, committed on clean exit.

        Changes are discarded if the block raises. No validation runs on
        the snapshot; the flush still enforces the file format.
        """
        tables = self._snapshot()
        yield tables
        with self._track("unsafe_commit"):
            self._commit(tables)

    # --- Export ---

    def to_json(self) -> str:
        """Dump every table with its schema, rows and ``last_id``."""
        dump = json.dumps(
            {name: table.to_dict() for name, table in self._tables.items()},
            indent=2,
            default=_json_default,
        )
        self._log_operation("to_json", "Dump in JSON format", {"bytes": len(dump)})
        return dump

    def get_stats(self) -> dict:
        """Get database statistics."""
        return {
            "path": str(self.path),
            "version": self._version,
            "authenticated": self._credentials is not None,
            "reload_after_write": self._persistence.reload_after_write,
            "tables": {
                name: {"rows": len(table.rows), "last_id": table.last_id}
                for name, table in self._tables.items()
            },
        }


def create_database(
    path: str | Path,
    username: str,
    password: str,
    config: Config | None = None,
    metrics: MetricsRegistry | None = None,
) -> Database:
    """Create a new authenticated database file and open it.

    Raises:
        DatabaseExistsError: If a file already exists at ``path``.
        ValueError: If the credentials are empty or contain reserved characters.
    """
    config = config or get_config()
    credentials = Credentials(username=username, password=password)
    store = TextFileStore(
        path, encoding=config.storage.encoding, sync_mode=config.storage.sync_mode
    )
    if store.exists():
        raise DatabaseExistsError(f"Database already exists: {store.path}")

    try:
        store.create([credentials.to_header()])
    except FileExistsError as e:
        raise DatabaseExistsError(f"Database already exists: {store.path}") from e

    return Database(path, username, password, config=config, metrics=metrics)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
