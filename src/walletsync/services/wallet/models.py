"""Data models for the wallet accounting engine.

Defines the value types the ledger is built from and the summaries derived
from it:
- TransactionInfo: timestamp, quantity and unit price of one trade
- BuyEvent / SellEvent: a transaction tagged with instrument code and side
- Event: discriminated union of the two event variants
- NetPosition: derived summary for an instrument currently held

Amounts are not validated here. Zero or negative quantities and prices are
carried through unchanged; rejecting malformed input belongs to the event
source that produced them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

Code = str

# Sentinel average price for an instrument with no buy events
UNDEFINED_PRICE = Decimal("NaN")


class TradeSide(str, Enum):
    """Direction of a trade."""

    BUY = "buy"
    SELL = "sell"


class TransactionInfo(BaseModel):
    """
    Single trade as recorded by the broker.

    Attributes:
        timestamp: When the trade happened (UTC)
        quantity: Units traded
        price: Unit price in the wallet's currency

    Example:
        >>> info = TransactionInfo(
        ...     timestamp=datetime(2023, 3, 1, 10, 0, tzinfo=timezone.utc),
        ...     quantity=100,
        ...     price=Decimal("14.00"),
        ... )
    """

    timestamp: datetime
    quantity: int
    price: Decimal

    model_config = ConfigDict(frozen=True)


class _EventBase(BaseModel):
    """Fields shared by both event variants."""

    code: Code
    transaction: TransactionInfo

    model_config = ConfigDict(frozen=True)

    @property
    def quantity(self) -> int:
        return self.transaction.quantity

    @property
    def price(self) -> Decimal:
        return self.transaction.price

    @property
    def timestamp(self) -> datetime:
        return self.transaction.timestamp


class BuyEvent(_EventBase):
    """Purchase of `transaction.quantity` units of `code`."""

    side: Literal[TradeSide.BUY] = TradeSide.BUY

    @property
    def signed_quantity(self) -> int:
        return self.transaction.quantity


class SellEvent(_EventBase):
    """Sale of `transaction.quantity` units of `code`."""

    side: Literal[TradeSide.SELL] = TradeSide.SELL

    @property
    def signed_quantity(self) -> int:
        return -self.transaction.quantity


Event = Annotated[Union[BuyEvent, SellEvent], Field(discriminator="side")]


def make_event(
    side: TradeSide,
    code: Code,
    timestamp: datetime,
    quantity: int,
    price: Decimal,
) -> BuyEvent | SellEvent:
    """Build the event variant matching `side`."""
    transaction = TransactionInfo(timestamp=timestamp, quantity=quantity, price=price)
    if side == TradeSide.BUY:
        return BuyEvent(code=code, transaction=transaction)
    if side == TradeSide.SELL:
        return SellEvent(code=code, transaction=transaction)
    raise ValueError(f"Invalid trade side: {side}")


class NetPosition(BaseModel):
    """
    Summary of an instrument currently held.

    Only built when the net quantity is strictly positive.

    Attributes:
        code: Instrument code
        net_quantity: Bought minus sold units (always >= 1)
        average_price: Quantity-weighted mean of buy prices; NaN when the
            holding was reached without any buy event
    """

    code: Code
    net_quantity: int
    average_price: Decimal = Field(allow_inf_nan=True)

    model_config = ConfigDict(frozen=True)

    @property
    def cost_basis(self) -> Decimal:
        """Net quantity valued at the average acquisition price."""
        return self.average_price * self.net_quantity
