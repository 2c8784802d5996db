"""CLI commands for walletsync."""

from walletsync.cli.commands.positions import positions_command
from walletsync.cli.commands.sync import sync_command

__all__ = ["positions_command", "sync_command"]
