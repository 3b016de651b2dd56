"""Chart data read path: cache first, then windowed assembly.

For an owner with review settings on a symbol, the candle series for the
review window (publish time minus/plus configured days) is served from
CandleCache when present. A cache miss or forced refresh assembles the
window from the exchange and replaces the cached entry whole.

Without settings there is no window to anchor on: the most recent
``default_limit`` candles are fetched directly and never cached.
"""

from chartdesk.candles.assembler import RangeAssembler
from chartdesk.candles.fetcher import CandleFetcher
from chartdesk.candles.models import Candle, ChartCandles, FetchWindow, normalize_symbol
from chartdesk.config import CandleSettings
from chartdesk.data.cache import CandleCache
from chartdesk.data.settings_store import CoinSettingsStore
from chartdesk.logging import get_logger

logger = get_logger(__name__)


class ChartDataService:
    """Serves candle series to the rendering layer.

    Errors from the fetcher propagate unchanged; a failed refresh never
    falls back to stale cached data.
    """

    def __init__(
        self,
        fetcher: CandleFetcher,
        assembler: RangeAssembler,
        cache: CandleCache,
        settings_store: CoinSettingsStore,
        settings: CandleSettings,
    ) -> None:
        self._fetcher = fetcher
        self._assembler = assembler
        self._cache = cache
        self._settings_store = settings_store
        self._settings = settings

    @property
    def default_timeframe(self) -> str:
        """Timeframe used when a caller does not name one."""
        return self._settings.default_timeframe

    async def get_chart_candles(
        self,
        owner_id: str,
        symbol: str,
        timeframe: str,
        refresh: bool = False,
    ) -> ChartCandles:
        """Return the owner's review-window series for a symbol and timeframe."""
        key_symbol = normalize_symbol(symbol)
        coin_settings = await self._settings_store.get(owner_id, key_symbol)

        if coin_settings is None:
            logger.info(
                "no_settings_direct_fetch",
                owner_id=owner_id,
                symbol=symbol,
                timeframe=timeframe,
            )
            candles = await self.fetch_recent(symbol, timeframe)
            return ChartCandles(symbol=symbol, timeframe=timeframe, candles=candles)

        if not refresh:
            cached = await self._cache.get(owner_id, key_symbol, timeframe)
            if cached is not None:
                logger.info(
                    "cache_hit",
                    owner_id=owner_id,
                    symbol=symbol,
                    timeframe=timeframe,
                    candles=len(cached),
                )
                return ChartCandles(
                    symbol=symbol, timeframe=timeframe, candles=cached, cached=True
                )

        window = FetchWindow.around_publish_time(
            symbol,
            timeframe,
            coin_settings.publish_time_ms,
            days_before=self._settings.days_before_publish,
            days_after=self._settings.days_after_publish,
        )
        logger.info(
            "cache_miss" if not refresh else "cache_refresh",
            owner_id=owner_id,
            symbol=symbol,
            timeframe=timeframe,
            start_ms=window.start_ms,
            end_ms=window.end_ms,
        )

        candles = await self._assembler.assemble(
            window.symbol, window.timeframe, window.start_ms, window.end_ms
        )

        if candles:
            await self._cache.put(owner_id, key_symbol, timeframe, candles)

        return ChartCandles(symbol=symbol, timeframe=timeframe, candles=candles)

    async def fetch_recent(
        self,
        symbol: str,
        timeframe: str,
        since_ms: int | None = None,
        limit: int | None = None,
    ) -> list[Candle]:
        """Single uncached fetch, most recent candles unless since_ms is given."""
        return await self._fetcher.fetch(
            symbol,
            timeframe,
            since_ms=since_ms,
            limit=limit if limit is not None else self._settings.default_limit,
        )
