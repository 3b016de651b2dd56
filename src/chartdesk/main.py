"""Entry point for the chartdesk API service.

Wires all components together and serves the FastAPI app with uvicorn.
Component wiring order (in _lifespan):
1. AppSettings (configuration)
2. Logging setup
3. ChartDatabase (SQLite connection)
4. BinanceClient (public market data)
5. CandleFetcher / RangeAssembler (candle pipeline)
6. CandleCache / CoinSettingsStore / WatchlistStore (persistence)
7. ChartDataService (read path)
8. SymbolDirectory (symbol suggestions)
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from chartdesk.candles.assembler import RangeAssembler
from chartdesk.candles.fetcher import CandleFetcher
from chartdesk.config import AppSettings
from chartdesk.dashboard.app import create_app
from chartdesk.data.cache import CandleCache
from chartdesk.data.database import ChartDatabase
from chartdesk.data.settings_store import CoinSettingsStore
from chartdesk.data.watchlist_store import WatchlistStore
from chartdesk.exchange.binance_client import BinanceClient
from chartdesk.logging import get_logger, setup_logging
from chartdesk.market_data.symbol_directory import SymbolDirectory
from chartdesk.service import ChartDataService


def build_app(settings: AppSettings | None = None) -> FastAPI:
    """Create the FastAPI app with a lifespan that owns every component."""
    settings = settings or AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("chartdesk.main")

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        database = ChartDatabase(settings.database.db_path)
        await database.connect()
        exchange = BinanceClient(settings.exchange)

        fetcher = CandleFetcher(exchange)
        assembler = RangeAssembler(
            fetcher,
            max_batch_size=settings.candles.max_batch_size,
            batch_delay=settings.candles.batch_delay,
        )
        cache = CandleCache(database)
        settings_store = CoinSettingsStore(database)

        app.state.cache = cache
        app.state.settings_store = settings_store
        app.state.watchlist_store = WatchlistStore(database)
        app.state.chart_service = ChartDataService(
            fetcher, assembler, cache, settings_store, settings.candles
        )
        app.state.symbol_directory = SymbolDirectory(
            exchange,
            ttl_seconds=settings.symbols.cache_ttl_seconds,
            max_results=settings.symbols.max_results,
        )
        logger.info("chartdesk_started", db_path=settings.database.db_path)

        try:
            yield
        finally:
            await exchange.close()
            await database.close()
            logger.info("chartdesk_stopped")

    return create_app(lifespan=_lifespan)


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = AppSettings()
    app = build_app(settings)
    uvicorn.run(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
