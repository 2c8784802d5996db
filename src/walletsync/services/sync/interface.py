"""Remote wallet interface (Protocol).

Defines the contract every remote wallet client must satisfy so the sync
runner and CLI can be tested without network access.
"""

from typing import Protocol

from walletsync.services.sync.models import Ticker
from walletsync.services.wallet.models import BuyEvent, Code, SellEvent


class SyncError(Exception):
    """Base error for remote wallet failures."""


class TickerNotFoundError(SyncError):
    """The remote wallet does not know the instrument code."""

    def __init__(self, code: Code):
        self.code = code
        super().__init__(f"Ticker {code} not found")


class SyncRequestError(SyncError):
    """Transport failure, error status or unreadable response."""


class IWalletSync(Protocol):
    """
    Remote wallet that accepts individual trades.

    Example:
        >>> client: IWalletSync = Investidor10Client(config.sync)
        >>> for view in ledger.holdings():
        ...     for event in view.events:
        ...         client.add_asset(event)
    """

    def add_asset(self, event: BuyEvent | SellEvent) -> None:
        """
        Record one trade in the remote wallet.

        Raises:
            SyncError: If the trade could not be recorded
        """
        ...

    def get_ticker_id(self, code: Code) -> Ticker:
        """
        Resolve an instrument code to the wallet's identifier.

        Raises:
            TickerNotFoundError: If no instrument matches
            SyncRequestError: If the lookup itself failed
        """
        ...
