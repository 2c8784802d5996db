"""System configuration for walletsync.

One YAML file configures the whole tool:

    source:   how trade records are parsed (delimiter, date format, timezone)
    sync:     how the remote wallet is reached (base URL, session, wallet id)
    logging:  console/file logging

Resolution order for the file:
1. Explicit path passed to SystemConfig.load()
2. WALLETSYNC_CONFIG environment variable
3. config/system.yaml in the working directory
4. Built-in defaults

String values may reference environment variables as ${VAR_NAME}; undefined
variables keep their placeholder.
"""

import os
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

from walletsync.system.log_system import LoggingConfig as LoggerConfig

CONFIG_ENV_VAR = "WALLETSYNC_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/system.yaml")

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass
class SourceConfig:
    """Trade record parsing settings."""

    delimiter: str = ","
    date_format: str = "%d/%m/%Y %H:%M:%S"
    has_headers: bool = False
    timezone: str = "UTC"
    strict: bool = True


@dataclass
class SyncConfig:
    """Remote wallet settings."""

    base_url: str = "https://investidor10.com.br"
    session_token: str | None = None
    wallet_id: int | None = None
    timeout_seconds: float = 30.0
    max_retries: int = 2
    user_agent: str = "walletsync"

    def __post_init__(self) -> None:
        # Values substituted from the environment arrive as strings
        if isinstance(self.session_token, str) and _ENV_VAR_PATTERN.fullmatch(self.session_token):
            self.session_token = None
        if isinstance(self.wallet_id, str):
            self.wallet_id = None if _ENV_VAR_PATTERN.fullmatch(self.wallet_id) else int(self.wallet_id)
        self.timeout_seconds = float(self.timeout_seconds)
        self.max_retries = int(self.max_retries)


@dataclass
class LoggingConfig:
    """Logging section of system.yaml."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json"] = "console"
    timestamp_format: Literal["iso", "compact"] = "compact"
    enable_file: bool = False
    file_path: str = "logs/walletsync.log"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the LoggerFactory configuration model."""
        return LoggerConfig(
            level=self.level,
            format=self.format,
            timestamp_format=self.timestamp_format,
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class SystemConfig:
    """Complete system configuration."""

    source: SourceConfig = field(default_factory=SourceConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration, merging the YAML file (if any) over defaults.

        Args:
            path: Explicit config file. Falls back to $WALLETSYNC_CONFIG, then
                config/system.yaml. A missing file yields defaults.

        Raises:
            ValueError: If the YAML cannot be parsed or a section is malformed
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        config_path = Path(path)

        raw: dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Failed to parse YAML from {config_path}: {e}")
            if not isinstance(raw, dict):
                raise ValueError(f"Config file {config_path} must contain a mapping, got {type(raw).__name__}")

        merged = _deep_merge(_defaults_as_dict(), _substitute_env_vars(raw))
        return cls._from_dict(merged)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build config from a (possibly partial) dictionary."""
        try:
            return cls(
                source=SourceConfig(**data.get("source", {})),
                sync=SyncConfig(**data.get("sync", {})),
                logging=LoggingConfig(**data.get("logging", {})),
            )
        except TypeError as e:
            raise ValueError(f"Invalid configuration: {e}")


def _defaults_as_dict() -> dict[str, Any]:
    return asdict(SystemConfig())


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base; override wins on conflicts."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} references in strings, recursing into dicts and lists."""
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config(path: Path | str | None = None) -> SystemConfig:
    """Get the cached system config; an explicit path forces a load from it."""
    global _system_config
    if path is not None:
        _system_config = SystemConfig.load(path)
    elif _system_config is None:
        _system_config = SystemConfig.load()
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Discard the cached config and load it again."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
