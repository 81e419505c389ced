import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from invsearch.application.pipeline.pipeline import DEFAULT_DEBOUNCE_MS
from invsearch.domain.cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL_MS
from invsearch.domain.inventory.model import DEFAULT_PAGE_SIZE
from invsearch.domain.shared.error import ConfigurationError

# =============================================================================
# Section Configuration
# =============================================================================


class ApiConfig(BaseModel):
    """Inventory API connection (nested in Config, uses env_nested_delimiter)."""

    base_url: str = "http://localhost:5000/api"
    timeout_seconds: float = Field(default=10.0, gt=0)


class CacheConfig(BaseModel):
    """Query cache bounds. Applied to both the search and peak-availability caches."""

    ttl_ms: int = Field(default=DEFAULT_TTL_MS, gt=0)
    max_entries: int = Field(default=DEFAULT_MAX_ENTRIES, ge=1)


class PipelineConfig(BaseModel):
    debounce_ms: int = Field(default=DEFAULT_DEBOUNCE_MS, ge=0)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from INVSEARCH_LOG_FILE env var."""
        return os.environ.get("INVSEARCH_LOG_FILE")


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by INVSEARCH_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        config_file = os.environ.get("INVSEARCH_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                try:
                    data = yaml.safe_load(path.read_text()) or {}
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
                if not isinstance(data, dict):
                    raise ConfigurationError(f"{path} must contain a mapping of settings")
                return data
        return {}


class Config(BaseSettings):
    api: ApiConfig = ApiConfig()
    cache: CacheConfig = CacheConfig()
    pipeline: PipelineConfig = PipelineConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="INVSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows INVSEARCH_CACHE__TTL_MS override
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - INVSEARCH_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called once at startup (the CLI does this before building
    the container).
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
