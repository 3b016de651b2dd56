"""Custom exceptions for chartdesk.

Upstream (ccxt) failures are translated into this taxonomy at the fetch
boundary so the API layer never has to know about exchange internals.
"""


class ChartDeskError(Exception):
    """Base exception for all chartdesk errors."""


class MarketDataError(ChartDeskError):
    """Raised when the market data source fails in an unclassified way."""


class InvalidSymbolError(MarketDataError):
    """Raised when the exchange reports the trading pair does not exist.

    Client-facing; never retried.
    """

    def __init__(self, symbol: str, message: str | None = None) -> None:
        self.symbol = symbol
        super().__init__(
            message
            or f"Invalid trading pair: {symbol}. This symbol is not available on the exchange."
        )


class UpstreamUnavailableError(MarketDataError):
    """Raised on network or connectivity failure reaching the exchange.

    The user may retry; the service itself does not.
    """


class SettingsNotFoundError(ChartDeskError):
    """Raised when no coin settings exist for an (owner, symbol) pair."""

    def __init__(self, owner_id: str, symbol: str) -> None:
        self.owner_id = owner_id
        self.symbol = symbol
        super().__init__(f"Settings not found for {symbol}")


class WatchlistDuplicateError(ChartDeskError):
    """Raised when a symbol is already on the owner's watchlist."""

    def __init__(self, owner_id: str, symbol: str) -> None:
        self.owner_id = owner_id
        self.symbol = symbol
        super().__init__("Symbol already in watchlist")
