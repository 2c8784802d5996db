"""Data models for remote wallet synchronisation.

- AssetType / Ticker: instrument identity as known by the remote wallet
- TradeRequest: body posted to the wallet's trade-entry endpoint
- SyncOutcome / SyncReport: per-event results of a sync run
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from walletsync.services.wallet.models import Code, Event


class AssetType(str, Enum):
    """Instrument category; values are the wallet's `ticker_type` strings."""

    TICKER = "Ticker"
    FII = "fii"


class Ticker(BaseModel):
    """Remote identity of an instrument code."""

    id: int
    name: str
    asset_type: AssetType

    model_config = ConfigDict(frozen=True)


class TickerInfo(BaseModel):
    """One hit returned by the ticker search endpoints."""

    id: int
    name: str

    model_config = ConfigDict(extra="ignore")


def format_price(price: Decimal) -> str:
    """
    Render a price the way the wallet's form submits it.

    Two decimals, comma decimal mark, padded with six zeros:
    Decimal("15.2222") -> "15,22000000"
    """
    rounded = price.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{rounded:.2f}".replace(".", ",") + "000000"


class TradeRequest(BaseModel):
    """
    Trade entry as accepted by the remote wallet.

    Serialize with `model_dump(by_alias=True)`; `trade_type` and `token` are
    sent as `type` and `_token`.
    """

    ticker_type: str
    user_wallet_id: int
    trade_type: Literal["BUY", "SELL"] = Field(alias="type")
    source: str = "Manual"
    token: str = Field(default="", alias="_token")
    date: datetime
    qty: int
    ticker: int
    price: Decimal
    cost: float = 0.0

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_serializer("date")
    def serialize_date(self, value: datetime) -> str:
        return value.strftime("%d/%m/%Y")

    @field_serializer("price")
    def serialize_price(self, value: Decimal) -> str:
        return format_price(value)


class SyncOutcome(BaseModel):
    """Result of pushing one event."""

    event: Event
    success: bool
    error: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def code(self) -> Code:
        return self.event.code


class SyncReport(BaseModel):
    """Results of a sync run in submission order."""

    outcomes: list[SyncOutcome] = Field(default_factory=list)

    @property
    def added(self) -> list[SyncOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[SyncOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def ok(self) -> bool:
        return not self.failed
