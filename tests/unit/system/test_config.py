"""
Unit tests for system/config.py.

Tests cover:
- Section dataclasses and their defaults
- SystemConfig.load() file resolution and merging
- Environment variable substitution
- Singleton functions: get_system_config(), reload_system_config()
"""

from pathlib import Path

import pytest

from walletsync.system.config import (
    LoggingConfig,
    SourceConfig,
    SyncConfig,
    SystemConfig,
    _deep_merge,
    _substitute_env_vars,
    get_system_config,
    reload_system_config,
)


class TestSourceConfig:
    """Test SourceConfig dataclass."""

    def test_create_with_defaults(self):
        """Test SourceConfig defaults."""
        config = SourceConfig()

        assert config.delimiter == ","
        assert config.date_format == "%d/%m/%Y %H:%M:%S"
        assert config.has_headers is False
        assert config.timezone == "UTC"
        assert config.strict is True


class TestSyncConfig:
    """Test SyncConfig dataclass."""

    def test_create_with_defaults(self):
        """Test SyncConfig defaults."""
        config = SyncConfig()

        assert config.base_url == "https://investidor10.com.br"
        assert config.session_token is None
        assert config.wallet_id is None
        assert config.timeout_seconds == 30.0
        assert config.max_retries == 2

    def test_coerces_numeric_strings(self):
        """Test numeric strings from env substitution are coerced."""
        config = SyncConfig(wallet_id="194632", timeout_seconds="10", max_retries="0")  # type: ignore[arg-type]

        assert config.wallet_id == 194632
        assert config.timeout_seconds == 10.0
        assert config.max_retries == 0

    def test_unresolved_placeholders_become_none(self):
        """Test unset ${VAR} placeholders read as missing."""
        config = SyncConfig(
            session_token="${INVESTIDOR10_SESSION}",
            wallet_id="${INVESTIDOR10_WALLET_ID}",  # type: ignore[arg-type]
        )

        assert config.session_token is None
        assert config.wallet_id is None

    def test_non_numeric_wallet_id_raises(self):
        """Test a non-numeric wallet id is rejected."""
        with pytest.raises(ValueError):
            SyncConfig(wallet_id="abc")  # type: ignore[arg-type]


class TestLoggingConfig:
    """Test LoggingConfig dataclass."""

    def test_create_with_defaults(self):
        """Test LoggingConfig defaults."""
        config = LoggingConfig()

        assert config.level == "INFO"
        assert config.format == "console"
        assert config.enable_file is False
        assert config.file_path == "logs/walletsync.log"

    def test_to_logger_config_converts_correctly(self):
        """Test conversion to the LoggerFactory model."""
        config = LoggingConfig(level="DEBUG", format="json", file_path="logs/app.log")

        logger_config = config.to_logger_config()

        assert logger_config.level == "DEBUG"
        assert logger_config.format == "json"
        assert logger_config.file_path == Path("logs/app.log")


class TestSystemConfigLoad:
    """Test SystemConfig.load() file loading."""

    def test_load_with_defaults_when_no_file(self, tmp_path):
        """Test defaults are used when the file does not exist."""
        config = SystemConfig.load(tmp_path / "nonexistent.yaml")

        assert config.source == SourceConfig()
        assert config.sync == SyncConfig()
        assert config.logging.level == "INFO"

    def test_load_merges_partial_config(self, tmp_path):
        """Test a partial file is merged over defaults."""
        config_file = tmp_path / "partial.yaml"
        config_file.write_text(
            """
source:
  timezone: America/Sao_Paulo

sync:
  wallet_id: 194632

logging:
  level: DEBUG
"""
        )

        config = SystemConfig.load(config_file)

        assert config.source.timezone == "America/Sao_Paulo"
        assert config.source.delimiter == ","
        assert config.sync.wallet_id == 194632
        assert config.sync.base_url == "https://investidor10.com.br"
        assert config.logging.level == "DEBUG"

    def test_load_handles_empty_file(self, tmp_path):
        """Test an empty file gives defaults."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        config = SystemConfig.load(config_file)

        assert config.source.timezone == "UTC"

    def test_load_uses_env_var_path(self, tmp_path, monkeypatch):
        """Test WALLETSYNC_CONFIG selects the file."""
        config_file = tmp_path / "env.yaml"
        config_file.write_text("source:\n  delimiter: ';'\n")
        monkeypatch.setenv("WALLETSYNC_CONFIG", str(config_file))

        config = SystemConfig.load()

        assert config.source.delimiter == ";"

    def test_load_substitutes_env_vars(self, tmp_path, monkeypatch):
        """Test ${VAR} values are substituted from the environment."""
        monkeypatch.setenv("INVESTIDOR10_SESSION", "secret-cookie")
        monkeypatch.setenv("INVESTIDOR10_WALLET_ID", "42")
        config_file = tmp_path / "env_vars.yaml"
        config_file.write_text(
            """
sync:
  session_token: ${INVESTIDOR10_SESSION}
  wallet_id: ${INVESTIDOR10_WALLET_ID}
"""
        )

        config = SystemConfig.load(config_file)

        assert config.sync.session_token == "secret-cookie"
        assert config.sync.wallet_id == 42

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        """Test malformed YAML raises ValueError."""
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("source: [unclosed\n")

        with pytest.raises(ValueError, match="Failed to parse YAML"):
            SystemConfig.load(config_file)

    def test_unknown_key_raises_value_error(self, tmp_path):
        """Test an unknown section key raises ValueError."""
        config_file = tmp_path / "unknown.yaml"
        config_file.write_text("source:\n  colour: blue\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            SystemConfig.load(config_file)

    def test_non_mapping_raises_value_error(self, tmp_path):
        """Test a top-level list raises ValueError."""
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            SystemConfig.load(config_file)


class TestDeepMerge:
    """Test _deep_merge() helper."""

    def test_merge_nested_dicts(self):
        """Test nested keys are merged recursively."""
        result = _deep_merge({"a": {"x": 1, "y": 2}, "b": 3}, {"a": {"y": 20}})

        assert result == {"a": {"x": 1, "y": 20}, "b": 3}

    def test_override_wins_on_type_conflict(self):
        """Test a scalar override replaces a mapping."""
        result = _deep_merge({"a": {"x": 1}}, {"a": "flat"})

        assert result == {"a": "flat"}


class TestSubstituteEnvVars:
    """Test _substitute_env_vars() helper."""

    def test_substitute_in_nested_structures(self, monkeypatch):
        """Test substitution inside nested dicts and lists."""
        monkeypatch.setenv("HOST", "localhost")
        monkeypatch.setenv("PORT", "8080")

        result = _substitute_env_vars({"url": "http://${HOST}:${PORT}/api", "items": ["${HOST}", 1]})

        assert result == {"url": "http://localhost:8080/api", "items": ["localhost", 1]}

    def test_undefined_var_keeps_placeholder(self, monkeypatch):
        """Test an undefined variable is left as is."""
        monkeypatch.delenv("UNDEFINED_VAR", raising=False)

        assert _substitute_env_vars({"key": "${UNDEFINED_VAR}"}) == {"key": "${UNDEFINED_VAR}"}


class TestSingletonFunctions:
    """Test get_system_config() and reload_system_config()."""

    def test_get_system_config_returns_cached_instance(self):
        """Test get_system_config() caches its instance."""
        assert get_system_config() is get_system_config()

    def test_reload_creates_new_instance(self):
        """Test reload_system_config() replaces the cache."""
        first = get_system_config()

        second = reload_system_config()

        assert first is not second
        assert get_system_config() is second

    def test_explicit_path_overrides_cache(self, tmp_path):
        """Test an explicit path loads that file."""
        custom = tmp_path / "custom.yaml"
        custom.write_text("logging:\n  level: DEBUG\n")

        assert get_system_config(custom).logging.level == "DEBUG"
