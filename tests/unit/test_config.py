"""Unit tests for configuration module."""

from __future__ import annotations

import pytest

from pipestore.infrastructure.config import (
    CodecConfig,
    Config,
    ObservabilityConfig,
    StorageConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.storage.encoding == "utf-8"
        assert config.storage.sync_mode == "fsync"
        assert config.storage.reload_after_write is True
        assert config.codec.strict_numbers is False
        assert config.observability.verbose_operations is False
        assert config.observability.log_format == "json"

    def test_custom_sections(self) -> None:
        config = Config(
            storage=StorageConfig(sync_mode="none", reload_after_write=False),
            codec=CodecConfig(strict_numbers=True),
        )

        assert config.storage.sync_mode == "none"
        assert config.storage.reload_after_write is False
        assert config.codec.strict_numbers is True

    def test_invalid_sync_mode(self) -> None:
        """Test that an unknown sync mode raises validation error."""
        with pytest.raises(ValueError):
            StorageConfig(sync_mode="sometimes")  # type: ignore[arg-type]

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError):
            ObservabilityConfig(log_level="LOUD")  # type: ignore[arg-type]

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested settings can be set through PIPESTORE_ variables."""
        monkeypatch.setenv("PIPESTORE_CODEC__STRICT_NUMBERS", "true")
        monkeypatch.setenv("PIPESTORE_STORAGE__SYNC_MODE", "none")
        monkeypatch.setenv("PIPESTORE_OBSERVABILITY__VERBOSE_OPERATIONS", "1")

        config = Config()

        assert config.codec.strict_numbers is True
        assert config.storage.sync_mode == "none"
        assert config.observability.verbose_operations is True


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
