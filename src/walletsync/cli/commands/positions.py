"""Positions report command."""

from pathlib import Path
from typing import Optional, TextIO

import click
from rich.console import Console

from walletsync.cli.commands.common import (
    config_option,
    input_option,
    load_config,
    load_ledger,
    log_level_option,
    open_source,
)
from walletsync.cli.ui.formatters import add_position_row, create_positions_table

console = Console()


@click.command("positions")
@input_option
@config_option
@click.option(
    "--all",
    "-a",
    "show_all",
    is_flag=True,
    help="Also list instruments that are fully sold or oversold",
)
@log_level_option
def positions_command(
    input_file: TextIO,
    config_file: Optional[Path],
    show_all: bool,
    log_level: Optional[str],
):
    """
    Show net position and average price per instrument.

    \b
    Examples:
        # Held instruments from a broker export
        walletsync positions -f trades.csv

        # Pipe from stdin, include closed instruments
        cat trades.csv | walletsync positions --all
    """
    system_config = load_config(config_file, log_level)
    source = open_source(system_config)
    ledger = load_ledger(input_file, source)

    if show_all:
        table = create_positions_table("Instruments")
        for code in ledger.codes():
            view = ledger.lookup(code)
            if view is not None:
                add_position_row(table, view)
    else:
        table = create_positions_table()
        for view in ledger.holdings():
            add_position_row(table, view)

    if table.row_count == 0:
        console.print("[yellow]No holdings found[/yellow]")
        return

    console.print(table)
    console.print(f"[dim]{ledger.event_count} events across {len(ledger)} instruments[/dim]")
