"""Broker trade-history CSV event source.

Reads delimited records with the columns:

    date,code,action,amount,price

for example:

    01/03/2023 10:00:00,PETR4,B,200,"14,00"

Parsing rules:
  - date: `SourceConfig.date_format` (default %d/%m/%Y %H:%M:%S), read in
    `SourceConfig.timezone` and converted to UTC
  - action: "B" (buy) or "S" (sell), case-insensitive
  - amount: integer
  - price: "14.00", "14,00" or "1.234,56" (Brazilian thousands/decimal marks)
  - Extra trailing columns are ignored; blank lines are skipped

In strict mode (default) the first malformed record raises EventSourceError.
Otherwise the record is logged and skipped.
"""

import csv
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Iterator, Sequence, TextIO
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from walletsync.services.wallet.models import BuyEvent, SellEvent, TradeSide, make_event
from walletsync.system import LoggerFactory
from walletsync.system.config import SourceConfig

logger = LoggerFactory.get_logger()

FIELD_COUNT = 5

_SIDE_MARKERS = {
    "B": TradeSide.BUY,
    "S": TradeSide.SELL,
}


class EventSourceError(ValueError):
    """Malformed trade record."""

    def __init__(self, message: str, line_number: int | None = None, record: Sequence[str] | None = None):
        self.line_number = line_number
        self.record = list(record) if record is not None else None
        prefix = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{prefix}{message}")


def parse_side(text: str) -> TradeSide:
    """Map a B/S marker to a trade side."""
    marker = text.strip().upper()
    try:
        return _SIDE_MARKERS[marker]
    except KeyError:
        raise EventSourceError(f"Unknown action marker {text!r} (expected 'B' or 'S')")


def parse_price(text: str) -> Decimal:
    """
    Parse a unit price written with either decimal convention.

    A comma is taken as the decimal mark, in which case dots are thousands
    separators ("1.234,56" -> 1234.56). Without a comma the text is read as-is.
    """
    cleaned = text.strip().replace(" ", "")
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        price = Decimal(cleaned)
    except InvalidOperation:
        raise EventSourceError(f"Invalid price {text!r}")
    if not price.is_finite():
        raise EventSourceError(f"Invalid price {text!r}")
    return price


def parse_quantity(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise EventSourceError(f"Invalid amount {text!r} (expected an integer)")


class CsvEventSource:
    """
    Event source for broker trade-history CSV files.

    Example:
        >>> source = CsvEventSource(SourceConfig(timezone="America/Sao_Paulo"))
        >>> events = source.read_path(Path("trades.csv"))
        >>> ledger = Ledger.from_events(events)
    """

    def __init__(self, config: SourceConfig | None = None) -> None:
        """
        Raises:
            EventSourceError: If `config.timezone` is not a known IANA zone
        """
        self.config = config or SourceConfig()
        try:
            self.tz = ZoneInfo(self.config.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise EventSourceError(f"Unknown timezone {self.config.timezone!r} (set source.timezone)") from e

    def parse_timestamp(self, text: str) -> datetime:
        try:
            naive = datetime.strptime(text.strip(), self.config.date_format)
        except ValueError:
            raise EventSourceError(f"Invalid date {text!r} (expected format {self.config.date_format})")
        return naive.replace(tzinfo=self.tz).astimezone(timezone.utc)

    def parse_record(self, fields: Sequence[str], line_number: int | None = None) -> BuyEvent | SellEvent:
        """
        Convert one CSV row into an event.

        Raises:
            EventSourceError: If the row is short or a field cannot be parsed
        """
        if len(fields) < FIELD_COUNT:
            raise EventSourceError(
                f"Expected {FIELD_COUNT} fields (date,code,action,amount,price), got {len(fields)}",
                line_number,
                fields,
            )

        date_text, code, action, amount, price = fields[:FIELD_COUNT]
        code = code.strip()
        if not code:
            raise EventSourceError("Empty instrument code", line_number, fields)

        try:
            return make_event(
                side=parse_side(action),
                code=code,
                timestamp=self.parse_timestamp(date_text),
                quantity=parse_quantity(amount),
                price=parse_price(price),
            )
        except EventSourceError as e:
            raise EventSourceError(str(e), line_number, fields) from e

    def read(self, stream: TextIO) -> Iterator[BuyEvent | SellEvent]:
        """Stream events from an open text stream in file order."""
        reader: Iterable[list[str]] = csv.reader(stream, delimiter=self.config.delimiter)
        for index, fields in enumerate(reader, start=1):
            if index == 1 and self.config.has_headers:
                continue
            if not fields or all(not f.strip() for f in fields):
                continue

            try:
                event = self.parse_record(fields, line_number=index)
            except EventSourceError as e:
                if self.config.strict:
                    raise
                logger.warning("csv_source.record_rejected", line=index, record=fields, error=str(e))
                continue

            logger.debug(
                "csv_source.record_parsed",
                line=index,
                code=event.code,
                side=event.side.value,
                quantity=event.quantity,
            )
            yield event

    def load(self, stream: TextIO, name: str = "-") -> list[BuyEvent | SellEvent]:
        """Read every event from an open stream."""
        events = list(self.read(stream))
        logger.info("csv_source.loaded", path=name, events=len(events))
        return events

    def read_path(self, path: Path) -> list[BuyEvent | SellEvent]:
        """Read every event from a CSV file."""
        with Path(path).open("r", newline="", encoding="utf-8") as f:
            return self.load(f, str(path))
