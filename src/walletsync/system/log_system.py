"""Centralized logging configuration for walletsync.

Every module logs through structlog; records are routed through the stdlib
root logger to a stderr console handler and, optionally, a rotating JSON
file. Event names are dotted (`csv_source.loaded`, `sync.event_failed`).
"""

import inspect
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Literal

import structlog
from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LOG_FILE = Path("logs/walletsync.log")

_ROOT_LOGGER_NAME = "walletsync"


class LoggingConfig(BaseModel):
    """Configuration for logging system.

    Logging Levels Guide:

    INFO (Default):
    - Trade files loaded
    - Events posted to the remote wallet
    - Sync summaries

    DEBUG:
    - Per-record parsing details
    - Ledger grouping
    - Ticker resolution attempts

    WARNING:
    - Rejected CSV records (lenient mode)

    ERROR:
    - Events that failed to sync

    Timestamp Format Options:
    - "compact": 251022-205007.28 (YYMMDD-HHMMSS.cs)
    - "iso": 2025-10-22T20:50:07.288824+00:00
    """

    level: LogLevel = Field(default="INFO", description="Minimum log level for console output")
    format: Literal["console", "json"] = Field(default="console", description="Console output format")
    timestamp_format: Literal["iso", "compact"] = Field(default="compact", description="Log timestamp format")
    enable_file: bool = Field(default=False, description="Also write JSON lines to a rotating file")
    file_path: Path | None = Field(default=None, description="Log file (logs/walletsync.log if None)")
    file_level: LogLevel = Field(default="WARNING", description="Minimum log level for file output")
    max_file_size_mb: int = Field(default=10, description="Log file size in MB before rotation")
    backup_count: int = Field(default=3, description="Number of rotated log files to keep")


class LoggerFactory:
    """
    Factory for creating and configuring structured loggers.

    Call configure() once at startup (the CLI does this from system.yaml);
    modules obtain loggers with get_logger(), which falls back to the default
    configuration when nothing has been configured yet.

    Example:
        LoggerFactory.configure(LoggingConfig(level="DEBUG", enable_file=True))
        logger = LoggerFactory.get_logger()
        logger.info("sync.event_added", code="PETR4", quantity=100)
    """

    _configured: bool = False

    @classmethod
    def configure(cls, config: LoggingConfig | None = None) -> None:
        """Install handlers on the root logger and configure structlog."""
        config = config or LoggingConfig()
        pre_chain = cls._build_common_processors(config.timestamp_format)

        handlers: list[logging.Handler] = [cls._console_handler(config, pre_chain)]
        root_level = getattr(logging, config.level)
        if config.enable_file:
            handlers.append(cls._configure_file_logging(config, pre_chain))
            root_level = min(root_level, getattr(logging, config.file_level))

        logging.basicConfig(level=root_level, handlers=handlers, force=True)

        if config.format == "console":
            exc_processors = [
                structlog.dev.set_exc_info,
                structlog.processors.ExceptionRenderer(structlog.dev.plain_traceback),  # type: ignore[arg-type]
            ]
        else:
            exc_processors = [structlog.processors.format_exc_info]

        structlog.configure(
            processors=[*pre_chain, *exc_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        cls._configured = True

    @classmethod
    def _build_common_processors(cls, timestamp_format: str) -> list[Any]:
        """Processors run before rendering, for structlog and foreign records alike."""
        return [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            cls._get_timestamper(timestamp_format),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
        ]

    @staticmethod
    def _get_timestamper(fmt: str) -> Any:
        """Timestamp processor writing `log_timestamp`.

        Trade events carry a `timestamp` of their own, hence the separate key.
        """

        def add_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
            now = datetime.now(timezone.utc)
            if fmt == "compact":
                event_dict["log_timestamp"] = now.strftime(f"%y%m%d-%H%M%S.{now.microsecond // 10000:02d}")
            else:
                event_dict["log_timestamp"] = now.isoformat()
            return event_dict

        return add_timestamp

    @classmethod
    def _console_handler(cls, config: LoggingConfig, pre_chain: list[Any]) -> logging.Handler:
        # stderr keeps stdout free for tables
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setLevel(getattr(logging, config.level))
        renderer: Any
        if config.format == "console":
            renderer = cls._custom_console_renderer()
        else:
            renderer = structlog.processors.JSONRenderer()
        handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
        return handler

    @staticmethod
    def _custom_console_renderer() -> Callable[[Any, str, dict[str, Any]], str]:
        """Console renderer: timestamp [level] event | key=value (module:lineno)."""
        colors = {
            "DEBUG": "\033[36m",
            "INFO": "\033[32m",
            "WARNING": "\033[33m",
            "ERROR": "\033[31m",
            "CRITICAL": "\033[35m",
        }
        reset = "\033[0m"
        gray = "\033[90m"

        def renderer(logger: Any, name: str, event_dict: dict[str, Any]) -> str:
            timestamp = event_dict.pop("log_timestamp", "")
            level = event_dict.pop("level", "info").upper()
            event = event_dict.pop("event", "")
            filename = event_dict.pop("filename", "")
            lineno = event_dict.pop("lineno", "")
            logger_name = event_dict.pop("logger", "")
            exception = event_dict.pop("exception", None)

            parts = [timestamp, f"[{colors.get(level, '')}{level.lower()}{reset}]", event]

            context = " ".join(f"{key}={value}" for key, value in sorted(event_dict.items()) if not key.startswith("_"))
            if context:
                parts.append(f"{gray}|{reset} {context}")

            if filename and lineno:
                module_file = Path(filename).stem
                origin = f"{logger_name}.{module_file}" if logger_name and logger_name != _ROOT_LOGGER_NAME else module_file
                parts.append(f"{gray}({origin}:{lineno}){reset}")

            line = " ".join(part for part in parts if part)
            if exception:
                line = f"{line}\n{exception}"
            return line

        return renderer

    @classmethod
    def _configure_file_logging(cls, config: LoggingConfig, pre_chain: list[Any]) -> logging.Handler:
        """Rotating JSON-lines file handler."""
        file_path = config.file_path or DEFAULT_LOG_FILE
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler = RotatingFileHandler(
            filename=str(file_path),
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(getattr(logging, config.file_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=pre_chain,
            )
        )
        return handler

    @classmethod
    def get_logger(cls, name: str | None = None):
        """
        Get a configured logger instance.

        Args:
            name: Logger name; defaults to the calling module's __name__

        Returns:
            structlog BoundLogger
        """
        if not cls._configured:
            cls.configure()

        if name is None:
            frame = inspect.currentframe()
            caller = frame.f_back if frame else None
            name = caller.f_globals.get("__name__", _ROOT_LOGGER_NAME) if caller else _ROOT_LOGGER_NAME

        return structlog.get_logger(name)

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @classmethod
    def reset(cls) -> None:
        """Drop root handlers and structlog configuration (used by tests)."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(logging.NOTSET)
        cls._configured = False
        structlog.reset_defaults()
