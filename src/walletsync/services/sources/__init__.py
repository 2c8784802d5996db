"""Event sources: turn external trade records into wallet events."""

from walletsync.services.sources.csv_source import (
    CsvEventSource,
    EventSourceError,
    parse_price,
    parse_side,
)

__all__ = [
    "CsvEventSource",
    "EventSourceError",
    "parse_price",
    "parse_side",
]
