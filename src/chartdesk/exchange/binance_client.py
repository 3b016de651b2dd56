"""Binance exchange client implementation via ccxt async.

Wraps ccxt.async_support.binance with market loading and async cleanup.
Only public endpoints are used; no API keys are configured.
"""

import ccxt.async_support as ccxt_async

from chartdesk.config import ExchangeSettings
from chartdesk.exchange.client import ExchangeClient
from chartdesk.logging import get_logger

logger = get_logger(__name__)


class BinanceClient(ExchangeClient):
    """Concrete Binance market data client using ccxt async."""

    def __init__(self, settings: ExchangeSettings) -> None:
        self._settings = settings
        self._exchange = ccxt_async.binance(
            {
                "enableRateLimit": settings.enable_rate_limit,
                "timeout": settings.timeout_ms,
            }
        )
        self._markets: dict = {}

    @property
    def exchange(self) -> ccxt_async.binance:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def connect(self) -> None:
        """Initialize connection by loading markets."""
        logger.info("connecting_to_binance")
        self._markets = await self._exchange.load_markets()
        logger.info("binance_connected", market_count=len(self._markets))

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        logger.info("closing_binance_connection")
        await self._exchange.close()
        logger.info("binance_connection_closed")

    async def load_markets(self, reload: bool = False) -> dict:
        """Load and cache market data from Binance."""
        self._markets = await self._exchange.load_markets(reload)
        return self._markets

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1h",
        since: int | None = None,
        limit: int | None = None,
    ) -> list[list]:
        """Fetch OHLCV candles via ccxt."""
        return await self._exchange.fetch_ohlcv(symbol, timeframe, since, limit)
