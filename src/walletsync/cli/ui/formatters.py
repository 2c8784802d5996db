"""Rich table formatters for CLI output."""

from decimal import Decimal

from rich.table import Table

from walletsync.services.sync.models import SyncOutcome, SyncReport, TradeRequest
from walletsync.services.wallet.position import InstrumentView


def format_average_price(price: Decimal) -> str:
    """Two-decimal price, or "n/a" when undefined (no buys)."""
    if price.is_nan():
        return "n/a"
    return f"{price:,.2f}"


def create_positions_table(title: str = "Holdings") -> Table:
    """
    Create a Rich table for instrument positions.

    Returns:
        Configured Rich Table with columns
    """
    table = Table(title=title)
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Quantity", style="magenta", justify="right")
    table.add_column("Avg Price", style="yellow", justify="right")
    table.add_column("Cost Basis", style="green", justify="right")
    table.add_column("Events", style="dim", justify="right")
    return table


def add_position_row(table: Table, view: InstrumentView) -> None:
    """
    Add one instrument to a positions table.

    Instruments not currently held show their signed net quantity dimmed and
    no cost basis.
    """
    position = view.position()
    average = view.average_price()

    if position is not None:
        cost = position.cost_basis
        cost_str = "n/a" if cost.is_nan() else f"{cost:,.2f}"
        table.add_row(
            view.code,
            f"{position.net_quantity:,}",
            format_average_price(average),
            cost_str,
            str(len(view)),
        )
    else:
        table.add_row(
            view.code,
            f"{view.net_quantity():,}",
            format_average_price(average),
            "-",
            str(len(view)),
            style="dim",
        )


def create_trades_table() -> Table:
    """Create a Rich table listing trade requests (dry-run output)."""
    table = Table(title="Trades To Post")
    table.add_column("Date", style="dim")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Type", style="white")
    table.add_column("Qty", style="magenta", justify="right")
    table.add_column("Price", style="yellow", justify="right")
    return table


def add_trade_row(table: Table, code: str, trade: TradeRequest) -> None:
    body = trade.model_dump(mode="json", by_alias=True)
    side_style = "green" if trade.trade_type == "BUY" else "red"
    table.add_row(
        body["date"],
        code,
        f"[{side_style}]{trade.trade_type}[/{side_style}]",
        f"{trade.qty:,}",
        body["price"],
    )


def format_outcome(outcome: SyncOutcome) -> str:
    """One console line per synced event."""
    event = outcome.event
    label = f"{event.side.value.upper()} {event.quantity} {event.code} @ {event.price}"
    if outcome.success:
        return f"[green]✓ added[/green] {label}"
    return f"[red]✗ failed[/red] {label} [dim]({outcome.error})[/dim]"


def create_sync_summary_table(report: SyncReport) -> Table:
    """Per-instrument added/failed counts."""
    table = Table(title="Sync Summary")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Added", style="green", justify="right")
    table.add_column("Failed", style="red", justify="right")

    counts: dict[str, list[int]] = {}
    for outcome in report.outcomes:
        added_failed = counts.setdefault(outcome.code, [0, 0])
        added_failed[0 if outcome.success else 1] += 1

    for code, (added, failed) in counts.items():
        table.add_row(code, str(added), str(failed))
    return table
