"""Tests for Config Pydantic Settings."""

import logging
from pathlib import Path

import pytest

from invsearch.application.pipeline import DEFAULT_DEBOUNCE_MS
from invsearch.config import Config, LoggingConfig, configure_logging
from invsearch.domain.cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL_MS
from invsearch.domain.shared.error import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's .env and INVSEARCH_* variables out of these tests."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "INVSEARCH_CONFIG_FILE",
        "INVSEARCH_LOG_FILE",
        "INVSEARCH_CACHE__TTL_MS",
        "INVSEARCH_API__BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestConfigDefaults:
    def test_defaults(self) -> None:
        config = Config()

        assert config.api.base_url == "http://localhost:5000/api"
        assert config.cache.ttl_ms == DEFAULT_TTL_MS
        assert config.cache.max_entries == DEFAULT_MAX_ENTRIES
        assert config.pipeline.debounce_ms == 50
        assert config.pipeline.page_size == 20
        assert config.logging.level == "INFO"

    def test_env_prefix_is_invsearch(self) -> None:
        assert Config.model_config.get("env_prefix") == "INVSEARCH_"


class TestConfigSources:
    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INVSEARCH_CACHE__TTL_MS", "1000")
        monkeypatch.setenv("INVSEARCH_API__BASE_URL", "https://inventory.example.com/api")

        config = Config()

        assert config.cache.ttl_ms == 1000
        assert config.api.base_url == "https://inventory.example.com/api"

    def test_yaml_config_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        config_file = tmp_path / "invsearch.yaml"
        config_file.write_text("cache:\n  max_entries: 5\npipeline:\n  debounce_ms: 0\n")
        monkeypatch.setenv("INVSEARCH_CONFIG_FILE", str(config_file))

        config = Config()

        assert config.cache.max_entries == 5
        assert config.pipeline.debounce_ms == 0

    def test_env_wins_over_yaml(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        config_file = tmp_path / "invsearch.yaml"
        config_file.write_text("cache:\n  ttl_ms: 10\n")
        monkeypatch.setenv("INVSEARCH_CONFIG_FILE", str(config_file))
        monkeypatch.setenv("INVSEARCH_CACHE__TTL_MS", "99")

        assert Config().cache.ttl_ms == 99

    def test_missing_yaml_file_is_ignored(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("INVSEARCH_CONFIG_FILE", str(tmp_path / "missing.yaml"))

        assert Config().cache.ttl_ms == DEFAULT_TTL_MS

    def test_non_mapping_yaml_raises(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        config_file = tmp_path / "invsearch.yaml"
        config_file.write_text("- just\n- a list\n")
        monkeypatch.setenv("INVSEARCH_CONFIG_FILE", str(config_file))

        with pytest.raises(ConfigurationError):
            Config()

    def test_rejects_non_positive_ttl(self) -> None:
        with pytest.raises(ValueError):
            Config(cache={"ttl_ms": 0})


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_stream_handler_by_default(self) -> None:
        configure_logging(LoggingConfig(level="DEBUG"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_file_handler_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "invsearch.log"
        monkeypatch.setenv("INVSEARCH_LOG_FILE", str(log_file))

        configure_logging(LoggingConfig())

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler, logging.FileHandler)
        assert log_file.parent.is_dir()
        handler.close()


class TestPipelineDefaults:
    def test_debounce_default_matches_pipeline(self) -> None:
        assert Config().pipeline.debounce_ms == DEFAULT_DEBOUNCE_MS
