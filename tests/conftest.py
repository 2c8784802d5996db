"""Root conftest - shared fixtures for wallet events."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from walletsync.services.wallet.models import BuyEvent, SellEvent, TradeSide, make_event
from walletsync.system import LoggerFactory


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep log output off stdout/stderr noise and reset between tests."""
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


@pytest.fixture
def timestamp() -> datetime:
    """Standard timestamp for tests."""
    return datetime(2023, 3, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def buy(timestamp):
    """Factory for buy events: buy("PETR4", 200, "14.00")."""

    def _buy(code: str, quantity: int, price: str | Decimal, when: datetime | None = None) -> BuyEvent:
        event = make_event(TradeSide.BUY, code, when or timestamp, quantity, Decimal(str(price)))
        assert isinstance(event, BuyEvent)
        return event

    return _buy


@pytest.fixture
def sell(timestamp):
    """Factory for sell events: sell("PETR4", 100, "15.00")."""

    def _sell(code: str, quantity: int, price: str | Decimal, when: datetime | None = None) -> SellEvent:
        event = make_event(TradeSide.SELL, code, when or timestamp, quantity, Decimal(str(price)))
        assert isinstance(event, SellEvent)
        return event

    return _sell
