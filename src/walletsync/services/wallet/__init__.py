"""Wallet accounting engine.

Groups buy/sell events by instrument and derives, per instrument, the net
position and weighted average acquisition price.

Key components:
- Ledger: events partitioned by instrument code
- InstrumentView: per-instrument average price and net position
- Models: TransactionInfo, BuyEvent, SellEvent, Event, NetPosition

Example:
    >>> from datetime import datetime, timezone
    >>> from decimal import Decimal
    >>> from walletsync.services.wallet import Ledger, TradeSide, make_event
    >>>
    >>> ts = datetime(2023, 3, 1, tzinfo=timezone.utc)
    >>> ledger = Ledger.from_events([
    ...     make_event(TradeSide.BUY, "BBAS3", ts, 100, Decimal("20")),
    ...     make_event(TradeSide.BUY, "BBAS3", ts, 100, Decimal("25")),
    ...     make_event(TradeSide.SELL, "BBAS3", ts, 50, Decimal("20")),
    ... ])
    >>> ledger.lookup("BBAS3").average_price()
    Decimal('22.5')
"""

from walletsync.services.wallet.ledger import Ledger
from walletsync.services.wallet.models import (
    UNDEFINED_PRICE,
    BuyEvent,
    Code,
    Event,
    NetPosition,
    SellEvent,
    TradeSide,
    TransactionInfo,
    make_event,
)
from walletsync.services.wallet.position import InstrumentView

__all__ = [
    # Engine
    "Ledger",
    "InstrumentView",
    # Models
    "Code",
    "TradeSide",
    "TransactionInfo",
    "BuyEvent",
    "SellEvent",
    "Event",
    "NetPosition",
    "UNDEFINED_PRICE",
    "make_event",
]
