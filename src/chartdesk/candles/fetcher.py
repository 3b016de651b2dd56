"""Single bounded OHLCV request against the exchange.

Translates ccxt rows into Candle objects and ccxt failures into typed
errors. Pacing between requests is the caller's concern (RangeAssembler).
"""

import ccxt.async_support as ccxt_async

from chartdesk.candles.models import Candle
from chartdesk.exchange.client import ExchangeClient
from chartdesk.exchange.errors import translate_exchange_error
from chartdesk.logging import get_logger

logger = get_logger(__name__)


class CandleFetcher:
    """Issues one fetch_ohlcv call per invocation.

    Usage:
        fetcher = CandleFetcher(exchange)
        candles = await fetcher.fetch("BTC/USDT", "1h", since_ms=start, limit=120)
    """

    def __init__(self, exchange: ExchangeClient) -> None:
        self._exchange = exchange

    async def fetch(
        self,
        symbol: str,
        timeframe: str,
        since_ms: int | None = None,
        limit: int | None = None,
    ) -> list[Candle]:
        """Fetch at most ``limit`` candles starting at ``since_ms``.

        An empty list means the exchange has no rows for the window; it is
        not an error. Upstream failures raise InvalidSymbolError,
        UpstreamUnavailableError, or MarketDataError.
        """
        try:
            rows = await self._exchange.fetch_ohlcv(
                symbol, timeframe, since=since_ms, limit=limit
            )
        except ccxt_async.BaseError as e:
            logger.warning(
                "ohlcv_fetch_failed",
                symbol=symbol,
                timeframe=timeframe,
                since_ms=since_ms,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise translate_exchange_error(e, symbol) from e

        logger.debug(
            "ohlcv_fetched",
            symbol=symbol,
            timeframe=timeframe,
            since_ms=since_ms,
            limit=limit,
            rows=len(rows),
        )
        return [Candle.from_ohlcv(row) for row in rows]
