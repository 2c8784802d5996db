"""Investidor10 wallet client.

Posts individual trades to an Investidor10 wallet through the site's private
JSON API, authenticated with the browser's `laravel_session` cookie.

Endpoints (relative to SyncConfig.base_url):
  GET  /api/buscar/ticker/?_type=query&q=CODE      stock/ETF search
  GET  /api/buscar/fii/?_type=query&q=CODE         real-estate fund search
  POST /api/minhas-carteiras/lancamentos/{wallet}/ trade entry

Codes are looked up as stocks first and as FIIs when the stock search has no
hit or fails. Lookups are retried on connection errors and 5xx/429 responses;
trade posts are never retried since the endpoint is not idempotent.
"""

from datetime import timezone, tzinfo
from typing import Any

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from walletsync.services.sync.interface import SyncError, SyncRequestError, TickerNotFoundError
from walletsync.services.sync.models import AssetType, Ticker, TickerInfo, TradeRequest
from walletsync.services.wallet.models import BuyEvent, Code, SellEvent, TradeSide
from walletsync.system import LoggerFactory
from walletsync.system.config import SyncConfig

logger = LoggerFactory.get_logger()

_SEARCH_PATHS = {
    AssetType.TICKER: "/api/buscar/ticker/",
    AssetType.FII: "/api/buscar/fii/",
}


def build_session(config: SyncConfig) -> requests.Session:
    """Session carrying the auth cookie, JSON headers and lookup retries."""
    if not config.session_token:
        raise SyncError("No Investidor10 session token configured (set sync.session_token)")

    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": config.user_agent,
            "Content-Type": "application/json",
            "Cookie": f"laravel_session={config.session_token}",
        }
    )
    retries = Retry(
        total=config.max_retries,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class Investidor10Client:
    """
    Investidor10 implementation of IWalletSync.

    Attributes:
        config: Sync configuration (base URL, wallet id, timeout)
        session: HTTP session used for every request
        trade_timezone: Zone whose calendar date is sent for each trade; the
            wallet stores dates only, so this should be the zone the broker
            wrote the trades in (SourceConfig.timezone)

    Example:
        >>> client = Investidor10Client(SyncConfig(session_token="...", wallet_id=194632))
        >>> client.add_asset(event)
    """

    def __init__(
        self,
        config: SyncConfig,
        session: requests.Session | None = None,
        trade_timezone: tzinfo = timezone.utc,
    ) -> None:
        if config.wallet_id is None:
            raise SyncError("No Investidor10 wallet id configured (set sync.wallet_id)")

        self.config = config
        self.wallet_id: int = config.wallet_id
        self.base_url = config.base_url.rstrip("/")
        self.session = session if session is not None else build_session(config)
        self.trade_timezone = trade_timezone
        self._tickers: dict[Code, Ticker] = {}

        logger.debug("investidor10.initialized", base_url=self.base_url, wallet_id=self.wallet_id)

    # =========================================================
    # IWalletSync protocol methods
    # =========================================================
    def add_asset(self, event: BuyEvent | SellEvent) -> None:
        """Post one trade to the wallet."""
        trade = self.build_trade_request(event)
        url = f"{self.base_url}/api/minhas-carteiras/lancamentos/{self.wallet_id}/"

        try:
            response = self.session.post(
                url,
                json=trade.model_dump(mode="json", by_alias=True),
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise SyncRequestError(f"Failed to post {event.side.value} {event.code}: {e}") from e

        logger.info(
            "investidor10.trade_posted",
            code=event.code,
            side=event.side.value,
            quantity=event.quantity,
            ticker_id=trade.ticker,
        )

    def get_ticker_id(self, code: Code) -> Ticker:
        """Resolve `code` as a stock first, then as an FII."""
        cached = self._tickers.get(code)
        if cached is not None:
            return cached

        try:
            ticker = self._search(code, AssetType.TICKER)
        except SyncError as e:
            logger.debug("investidor10.ticker_lookup_failed", code=code, asset_type="Ticker", error=str(e))
            ticker = None

        if ticker is None:
            ticker = self._search(code, AssetType.FII)
        if ticker is None:
            raise TickerNotFoundError(code)

        self._tickers[code] = ticker
        logger.debug("investidor10.ticker_resolved", code=code, ticker_id=ticker.id, asset_type=ticker.asset_type.value)
        return ticker

    # =========================================================
    # Request building
    # =========================================================
    def build_trade_request(self, event: BuyEvent | SellEvent) -> TradeRequest:
        """Resolve the event's ticker and shape the trade entry body."""
        ticker = self.get_ticker_id(event.code)
        return TradeRequest(
            ticker_type=ticker.asset_type.value,
            user_wallet_id=self.wallet_id,
            trade_type="BUY" if event.side == TradeSide.BUY else "SELL",
            date=event.timestamp.astimezone(self.trade_timezone),
            qty=event.quantity,
            ticker=ticker.id,
            price=event.price,
        )

    def _search(self, code: Code, asset_type: AssetType) -> Ticker | None:
        """First hit of the search endpoint for `asset_type`, or None."""
        url = f"{self.base_url}{_SEARCH_PATHS[asset_type]}"
        try:
            response = self.session.get(
                url,
                params={"_type": "query", "q": code},
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
            payload: Any = response.json()
        except requests.RequestException as e:
            raise SyncRequestError(f"Ticker search for {code} failed: {e}") from e
        except ValueError as e:
            raise SyncRequestError(f"Ticker search for {code} returned invalid JSON: {e}") from e

        if not isinstance(payload, list) or not payload:
            return None

        try:
            info = TickerInfo.model_validate(payload[0])
        except ValidationError as e:
            raise SyncRequestError(f"Unexpected ticker search result for {code}: {e}") from e

        return Ticker(id=info.id, name=info.name, asset_type=asset_type)
