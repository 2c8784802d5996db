"""Helpers shared by CLI commands."""

from pathlib import Path
from typing import Literal, TextIO, cast

import click

from walletsync.services.sources.csv_source import CsvEventSource, EventSourceError
from walletsync.services.wallet.ledger import Ledger
from walletsync.system import LoggerFactory, SystemConfig, reload_system_config


def load_config(config_file: Path | None, log_level: str | None) -> SystemConfig:
    """
    Load system config and configure logging, applying a CLI level override.

    Raises:
        click.ClickException: If the configuration file is invalid
    """
    try:
        system_config = reload_system_config(config_file)
        if log_level:
            level = cast(Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], log_level.upper())
            system_config.logging.level = level
        LoggerFactory.configure(system_config.logging.to_logger_config())
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    return system_config


def open_source(system_config: SystemConfig) -> CsvEventSource:
    """Trade CSV reader for the configured dialect and timezone."""
    try:
        return CsvEventSource(system_config.source)
    except EventSourceError as e:
        raise click.ClickException(str(e))


def load_ledger(input_file: TextIO, source: CsvEventSource) -> Ledger:
    """
    Build a ledger from an open trade CSV (stdin when the option is "-").

    Raises:
        click.ClickException: If a record is malformed or the file cannot be read
    """
    name = getattr(input_file, "name", "-")
    try:
        events = source.load(input_file, name)
    except EventSourceError as e:
        raise click.ClickException(f"Invalid trade record: {e}")
    except OSError as e:
        raise click.ClickException(f"Cannot read {name}: {e}")

    return Ledger.from_events(events)


input_option = click.option(
    "--file",
    "-f",
    "input_file",
    type=click.File("r", encoding="utf-8"),
    default="-",
    show_default=True,
    help="Trade history CSV (date,code,action,amount,price); '-' reads stdin",
)

config_option = click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to system configuration file (YAML)",
)

log_level_option = click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set logging level",
)
