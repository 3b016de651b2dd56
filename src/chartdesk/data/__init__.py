"""Persistence layer.

SQLite database management, the per-owner candle cache, the coin
settings store that anchors review windows, and the owner watchlist.
"""

from chartdesk.data.cache import CandleCache
from chartdesk.data.database import ChartDatabase
from chartdesk.data.settings_store import CoinSettingsStore
from chartdesk.data.watchlist_store import WatchlistItem, WatchlistStore

__all__ = [
    "CandleCache",
    "ChartDatabase",
    "CoinSettingsStore",
    "WatchlistItem",
    "WatchlistStore",
]
