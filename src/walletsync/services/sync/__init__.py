"""Remote wallet synchronisation.

Key components:
- IWalletSync: Protocol for remote wallets
- Investidor10Client: Investidor10 private-API implementation
- sync_holdings: push every event of every held instrument
- Errors: SyncError, TickerNotFoundError, SyncRequestError
"""

from walletsync.services.sync.interface import IWalletSync, SyncError, SyncRequestError, TickerNotFoundError
from walletsync.services.sync.investidor10 import Investidor10Client, build_session
from walletsync.services.sync.models import (
    AssetType,
    SyncOutcome,
    SyncReport,
    Ticker,
    TradeRequest,
    format_price,
)
from walletsync.services.sync.service import sync_holdings

__all__ = [
    # Clients
    "IWalletSync",
    "Investidor10Client",
    "build_session",
    "sync_holdings",
    # Models
    "AssetType",
    "Ticker",
    "TradeRequest",
    "SyncOutcome",
    "SyncReport",
    "format_price",
    # Errors
    "SyncError",
    "SyncRequestError",
    "TickerNotFoundError",
]
