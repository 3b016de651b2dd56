"""Abstract exchange client interface.

The candle pipeline and symbol directory depend only on this interface,
keeping ccxt/Binance specifics isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod


class ExchangeClient(ABC):
    """Abstract base class for market data clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection and load markets."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (CRITICAL for ccxt async)."""
        ...

    @abstractmethod
    async def load_markets(self, reload: bool = False) -> dict:
        """Load and cache market data from the exchange."""
        ...

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1h",
        since: int | None = None,
        limit: int | None = None,
    ) -> list[list]:
        """Fetch OHLCV candle data.

        Returns list of [timestamp_ms, open, high, low, close, volume].
        Binance max limit: 1000 records per call.

        Pagination is NOT handled here -- callers are responsible for
        iterating with appropriate since parameters.
        """
        ...
