"""Unit tests for PersistenceEngine."""

from __future__ import annotations

from pathlib import Path

import pytest

from pipestore.adapters.outbound import TextFileStore
from pipestore.domain.entities import Table
from pipestore.domain.services import PersistenceEngine, ValueCodec
from pipestore.domain.value_objects import Credentials, normalize_schema
from pipestore.infrastructure.metrics import MetricsRegistry
from pipestore.ports.inbound import FormatError


def users_table(rows: list[dict]) -> Table:
    table = Table(
        "users",
        normalize_schema([("id", "int"), ("name", "string"), ("isAdmin", "boolean")]),
        rows=rows,
    )
    table.recompute_last_id()
    return table


class TestPersistenceEngine:
    """Tests for PersistenceEngine."""

    @pytest.fixture
    def store(self, temp_dir: Path) -> TextFileStore:
        return TextFileStore(temp_dir / "engine.pdb", sync_mode="none")

    @pytest.fixture
    def engine(self, store: TextFileStore, metrics_registry: MetricsRegistry) -> PersistenceEngine:
        return PersistenceEngine(store, ValueCodec(), metrics=metrics_registry)

    def test_initialize_with_credentials(
        self, engine: PersistenceEngine, store: TextFileStore
    ) -> None:
        engine.initialize(Credentials("admin", "pw"))
        assert store.read_lines() == ["#AUTH|username:admin|password:pw"]

    def test_initialize_twice_fails(self, engine: PersistenceEngine) -> None:
        engine.initialize(None)
        with pytest.raises(FileExistsError):
            engine.initialize(None)

    def test_save_reloads_normalized_state(
        self, engine: PersistenceEngine, store: TextFileStore
    ) -> None:
        """Values come back as the types the file encodes."""
        engine.initialize(None)
        table = users_table([{"id": 1, "name": 42, "isAdmin": True}])

        result = engine.save({"users": table})

        assert result.reloaded
        assert result.tables["users"].rows == [{"id": 1, "name": "42", "isAdmin": True}]
        assert result.tables["users"] is not table
        assert store.read_lines() == [
            "#TABLE users|id:int|name:string|isAdmin:boolean",
            "1|42|true",
        ]

    def test_save_does_not_touch_input(self, engine: PersistenceEngine) -> None:
        engine.initialize(None)
        table = users_table([{"id": 1, "name": 42, "isAdmin": True}])

        engine.save({"users": table})

        assert table.rows == [{"id": 1, "name": 42, "isAdmin": True}]

    def test_reload_keeps_higher_last_id(self, engine: PersistenceEngine) -> None:
        """Deleting the highest id does not make it reusable."""
        engine.initialize(None)
        table = users_table([{"id": 1, "name": "a", "isAdmin": False}])
        table.last_id = 5

        result = engine.save({"users": table})

        assert result.tables["users"].last_id == 5

    def test_load_derives_last_id(
        self, engine: PersistenceEngine, store: TextFileStore
    ) -> None:
        """last_id is not stored; a fresh load derives it from the rows."""
        engine.initialize(None)
        table = users_table([{"id": 3, "name": "a", "isAdmin": False}])
        table.last_id = 10
        engine.save({"users": table})

        assert engine.load().tables["users"].last_id == 3

    def test_save_writes_auth_header_first(
        self, engine: PersistenceEngine, store: TextFileStore
    ) -> None:
        credentials = Credentials("admin", "pw")
        engine.initialize(credentials)

        engine.save({"users": users_table([])}, credentials)

        lines = store.read_lines()
        assert lines[0] == "#AUTH|username:admin|password:pw"
        assert lines[1].startswith("#TABLE users")

    def test_unencodable_value_writes_nothing(
        self, engine: PersistenceEngine, store: TextFileStore
    ) -> None:
        engine.initialize(None)
        engine.save({"users": users_table([{"id": 1, "name": "ok", "isAdmin": True}])})
        before = store.read_lines()

        with pytest.raises(FormatError):
            engine.save({"users": users_table([{"id": 1, "name": "a|b", "isAdmin": True}])})

        assert store.read_lines() == before

    def test_reload_disabled(self, store: TextFileStore) -> None:
        engine = PersistenceEngine(store, ValueCodec(), reload_after_write=False)
        engine.initialize(None)
        tables = {"users": users_table([{"id": 1, "name": 42, "isAdmin": True}])}

        result = engine.save(tables)

        assert not result.reloaded
        assert result.tables is tables
        assert result.tables["users"].rows[0]["name"] == 42

    def test_flush_metrics(
        self, engine: PersistenceEngine, metrics_registry: MetricsRegistry
    ) -> None:
        engine.initialize(None)
        engine.save({"users": users_table([{"id": 1, "name": "a", "isAdmin": True}])})
        engine.save({"users": users_table([])})

        assert metrics_registry.flushes_total._value.get() == 2
        assert metrics_registry.rows.labels(table="users")._value.get() == 0
