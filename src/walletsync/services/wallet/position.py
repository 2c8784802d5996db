"""Per-instrument position calculation.

An InstrumentView pairs an instrument code with the ledger's event sequence
for that code and derives the average acquisition price and net position
from it. Views are read-only: they hold the ledger's own immutable tuple and
compute every figure on demand, so repeated queries always agree.

Reporting policy:
- average_price() is a weighted mean over buy events only. Sells do not
  reduce cost basis.
- position() reports a holding only when bought minus sold is >= 1. Fully
  exited and oversold instruments both read as "not held".
"""

from decimal import Decimal
from typing import Iterator

from walletsync.services.wallet.models import (
    UNDEFINED_PRICE,
    BuyEvent,
    Code,
    Event,
    NetPosition,
    SellEvent,
)


class InstrumentView:
    """
    Read-only view over one instrument's events.

    Attributes:
        code: Instrument code
        events: Events for this code in input order

    Example:
        >>> view = ledger.lookup("PETR4")
        >>> view.average_price()
        Decimal('15.22222222222222222222222222')
        >>> view.position().net_quantity
        900
    """

    __slots__ = ("_code", "_events")

    def __init__(self, code: Code, events: tuple[Event, ...]) -> None:
        self._code = code
        self._events = events

    @property
    def code(self) -> Code:
        return self._code

    @property
    def events(self) -> tuple[Event, ...]:
        return self._events

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __repr__(self) -> str:
        return f"InstrumentView(code={self._code!r}, events={len(self._events)})"

    def buys(self) -> Iterator[BuyEvent]:
        """Buy events in input order."""
        return (event for event in self._events if isinstance(event, BuyEvent))

    def sells(self) -> Iterator[SellEvent]:
        """Sell events in input order."""
        return (event for event in self._events if isinstance(event, SellEvent))

    def bought_quantity(self) -> int:
        return sum(event.quantity for event in self.buys())

    def sold_quantity(self) -> int:
        return sum(event.quantity for event in self.sells())

    def net_quantity(self) -> int:
        """Bought minus sold units; negative when oversold."""
        net = 0
        for event in self._events:
            net += event.signed_quantity
        return net

    def average_price(self) -> Decimal:
        """
        Quantity-weighted average price over buy events.

        Sells are excluded from both numerator and denominator, so the result
        reflects cumulative purchase cost rather than the cost of the units
        still held.

        Returns:
            sum(quantity * price) / sum(quantity) over buys, or Decimal("NaN")
            when the buy quantities sum to zero (including no buys at all)
        """
        total_quantity = 0
        total_cost = Decimal("0")
        for event in self.buys():
            total_quantity += event.quantity
            total_cost += event.price * event.quantity

        if total_quantity == 0:
            return UNDEFINED_PRICE
        return total_cost / total_quantity

    def is_held(self) -> bool:
        return self.net_quantity() >= 1

    def position(self) -> NetPosition | None:
        """
        Current holding, if any.

        Returns:
            NetPosition when the net quantity is strictly positive, else None
        """
        net = self.net_quantity()
        if net < 1:
            return None
        return NetPosition(code=self._code, net_quantity=net, average_price=self.average_price())
