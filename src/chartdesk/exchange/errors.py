"""Translation of ccxt exceptions into the chartdesk error taxonomy."""

import ccxt.async_support as ccxt_async

from chartdesk.exceptions import (
    InvalidSymbolError,
    MarketDataError,
    UpstreamUnavailableError,
)


def translate_exchange_error(exc: Exception, symbol: str | None = None) -> MarketDataError:
    """Map a ccxt exception to a typed MarketDataError.

    BadSymbol becomes InvalidSymbolError, NetworkError (timeouts included)
    becomes UpstreamUnavailableError, anything else a plain MarketDataError
    carrying the upstream message.
    """
    if isinstance(exc, ccxt_async.BadSymbol) and symbol is not None:
        return InvalidSymbolError(symbol)
    if isinstance(exc, ccxt_async.NetworkError):
        return UpstreamUnavailableError(
            f"Network error: Unable to connect to exchange. Please try again. ({exc})"
        )
    return MarketDataError(str(exc) or "Failed to fetch market data")
