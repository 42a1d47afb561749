"""Configuration management for opsfile."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from opsfile.tools.filesystem.models import Permission

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the configuration cannot be parsed or validated."""


def default_config_paths() -> list[Path]:
    """Config files searched, in order, when no explicit file is given."""
    return [
        Path("opsfile.yaml"),
        Path("opsfile.yml"),
        Path.home() / ".config" / "opsfile" / "config.yaml",
        Path.home() / ".config" / "opsfile" / "config.yml",
    ]


# Explicit config file requested through get_settings(config_file=...)
_config_file: Path | None = None


def _load_yaml_config(config_file: Path | None = None) -> dict[str, Any]:
    """Load YAML config file if it exists."""
    paths = [config_file] if config_file is not None else default_config_paths()

    for path in paths:
        if path.exists():
            logger.debug(f"Loading config from {path}")
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"Config file {path} must contain a mapping")
            return data

    return {}


class Settings(BaseSettings):
    """Settings loaded from YAML + environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OPSFILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Mode for directories created by move/copy (umask still applies)
    dir_mode: int = 0o755
    # Mode for files created by create/append (umask still applies)
    file_mode: int = 0o644
    copy_buffer_size: int = Field(default=1024 * 1024, gt=0)

    log_level: str = "WARNING"

    # Root directory exposed by the MCP server
    mcp_root: Path = Path(".")

    @field_validator("dir_mode", "file_mode", mode="before")
    @classmethod
    def parse_mode(cls, value: Any) -> int:
        """Accept octal strings ("755", "0o755") as well as ints."""
        return int(Permission.parse(value))

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="before")
    @classmethod
    def load_yaml_config(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Load YAML config and merge with env vars.

        Priority: Environment Variables > YAML Config > Defaults
        """
        yaml_config = _load_yaml_config(_config_file)

        for key, val in yaml_config.items():
            if val is not None and key not in values:
                values[key] = val

        return values

    @model_validator(mode="after")
    def expand_paths(self) -> "Settings":
        """Expand ~ in paths to the user's home directory."""
        self.mcp_root = Path(self.mcp_root).expanduser().resolve()
        return self


def _build_settings() -> Settings:
    """Build settings, reporting any invalid source as a ConfigError."""
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML config: {e}") from e


_settings: Settings | None = None


def get_settings(config_file: str | Path | None = None) -> Settings:
    """Get the current settings instance.

    Args:
        config_file: Load this YAML file instead of the default locations.
            Passing it rebuilds the settings.

    Raises:
        FileNotFoundError: If config_file does not exist
        ConfigError: If a config source holds invalid values or YAML
    """
    global _settings, _config_file
    if config_file is not None:
        path = Path(config_file).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        _config_file = path
        _settings = _build_settings()
    elif _settings is None:
        _settings = _build_settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings (useful after environment changes)."""
    global _settings
    _settings = _build_settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings and any explicit config file."""
    global _settings, _config_file
    _settings = None
    _config_file = None
