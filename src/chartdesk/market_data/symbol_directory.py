"""Trading pair lookup for symbol suggestions.

Holds the exchange's market symbol list in memory with an explicit TTL and an
injected clock. Constructed once per process and shared by handle.
"""

import asyncio
import time
from collections.abc import Callable

import ccxt.async_support as ccxt_async

from chartdesk.exchange.client import ExchangeClient
from chartdesk.exchange.errors import translate_exchange_error
from chartdesk.logging import get_logger

logger = get_logger(__name__)

_PREFERRED_QUOTE = "/USDT"


def _rank(symbol: str, query: str) -> tuple[bool, bool, str]:
    # False sorts first: prefix matches, then USDT-quoted pairs, then alphabetical
    return (not symbol.startswith(query), not symbol.endswith(_PREFERRED_QUOTE), symbol)


class SymbolDirectory:
    """Cached, searchable list of exchange symbols.

    Usage:
        directory = SymbolDirectory(exchange, ttl_seconds=3600)
        symbols, total = await directory.search("btc")
    """

    def __init__(
        self,
        exchange: ExchangeClient,
        ttl_seconds: float = 3600.0,
        max_results: int = 20,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._exchange = exchange
        self._ttl_seconds = ttl_seconds
        self._max_results = max_results
        self._clock = clock
        self._symbols: list[str] | None = None
        self._loaded_at = 0.0
        self._lock = asyncio.Lock()

    def is_expired(self) -> bool:
        """True when no symbols are cached or the cache is older than the TTL."""
        return self._symbols is None or self._clock() - self._loaded_at > self._ttl_seconds

    async def get_symbols(self) -> list[str]:
        """Return all market symbols, reloading from the exchange when expired."""
        async with self._lock:
            if self.is_expired():
                try:
                    markets = await self._exchange.load_markets(reload=self._symbols is not None)
                except ccxt_async.BaseError as e:
                    raise translate_exchange_error(e) from e
                self._symbols = list(markets.keys())
                self._loaded_at = self._clock()
                logger.info("symbol_directory_loaded", symbols=len(self._symbols))
            assert self._symbols is not None
            return self._symbols

    async def search(self, query: str = "") -> tuple[list[str], int]:
        """Return up to max_results matching symbols and the total match count.

        An empty query lists USDT-quoted pairs alphabetically. Otherwise
        symbols containing the (upper-cased) query are ranked prefix matches
        first, then USDT-quoted pairs, then alphabetically.
        """
        symbols = await self.get_symbols()
        query = query.strip().upper()

        if not query:
            matches = sorted(s for s in symbols if s.endswith(_PREFERRED_QUOTE))
        else:
            matches = sorted(
                (s for s in symbols if query in s),
                key=lambda s: _rank(s, query),
            )

        return matches[: self._max_results], len(matches)
