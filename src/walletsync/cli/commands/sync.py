"""Remote wallet sync command."""

import sys
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
from walletsync.cli.ui.formatters import (
    add_trade_row,
    create_sync_summary_table,
    create_trades_table,
    format_outcome,
)
from walletsync.services.sync import Investidor10Client, SyncError, sync_holdings

console = Console()


@click.command("sync")
@input_option
@config_option
@click.option(
    "--wallet-id",
    "-w",
    type=int,
    help="Override Investidor10 wallet id",
)
@click.option(
    "--session",
    "session_token",
    envvar="INVESTIDOR10_SESSION",
    help="laravel_session cookie value (defaults to $INVESTIDOR10_SESSION)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Resolve tickers and print the trades without posting them",
)
@log_level_option
def sync_command(
    input_file: TextIO,
    config_file: Optional[Path],
    wallet_id: Optional[int],
    session_token: Optional[str],
    dry_run: bool,
    log_level: Optional[str],
):
    """
    Post every trade of every held instrument to an Investidor10 wallet.

    \b
    Examples:
        export INVESTIDOR10_SESSION=...
        walletsync sync -f trades.csv --wallet-id 194632

        # Preview only
        walletsync sync -f trades.csv -w 194632 --dry-run

    \b
    Exit status is 1 when any trade failed to post.
    """
    system_config = load_config(config_file, log_level)
    if wallet_id is not None:
        system_config.sync.wallet_id = wallet_id
    if session_token:
        system_config.sync.session_token = session_token

    source = open_source(system_config)
    ledger = load_ledger(input_file, source)

    try:
        client = Investidor10Client(system_config.sync, trade_timezone=source.tz)
    except SyncError as e:
        raise click.ClickException(str(e))

    if dry_run:
        table = create_trades_table()
        for view in ledger.holdings():
            for event in view.events:
                try:
                    add_trade_row(table, event.code, client.build_trade_request(event))
                except SyncError as e:
                    console.print(f"[red]✗[/red] {event.code}: {e}")
        console.print(table)
        return

    console.rule("[bold blue]Investidor10 Sync[/bold blue]")
    report = sync_holdings(ledger, client, on_outcome=lambda outcome: console.print(format_outcome(outcome)))

    console.print()
    if not report.outcomes:
        console.print("[yellow]No holdings to sync[/yellow]")
        return

    console.print(create_sync_summary_table(report))
    console.print(f"  Added: [green]{len(report.added)}[/green]  Failed: [red]{len(report.failed)}[/red]")

    if not report.ok:
        sys.exit(1)
