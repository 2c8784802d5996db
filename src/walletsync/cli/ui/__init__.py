"""CLI UI components - Rich table formatters."""

from walletsync.cli.ui.formatters import (
    add_position_row,
    add_trade_row,
    create_positions_table,
    create_sync_summary_table,
    create_trades_table,
    format_average_price,
    format_outcome,
)

__all__ = [
    "add_position_row",
    "add_trade_row",
    "create_positions_table",
    "create_sync_summary_table",
    "create_trades_table",
    "format_average_price",
    "format_outcome",
]
