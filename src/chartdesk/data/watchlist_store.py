"""Per-owner watchlist of symbols the reviewer wants to keep an eye on.

Symbols are stored as submitted, so "BTC/USDT" and "BTCUSDT" are two
separate entries.
"""

import sqlite3
import time
from dataclasses import dataclass

from chartdesk.data.database import ChartDatabase
from chartdesk.exceptions import WatchlistDuplicateError
from chartdesk.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WatchlistItem:
    owner_id: str
    symbol: str
    created_at_ms: int

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "created_at": self.created_at_ms,
        }


class WatchlistStore:
    def __init__(self, database: ChartDatabase) -> None:
        self._database = database

    async def list_for_owner(self, owner_id: str) -> list[WatchlistItem]:
        """Return the owner's watchlist, newest first."""
        rows = await self._database.fetchall(
            "SELECT owner_id, symbol, created_at_ms FROM watchlist "
            "WHERE owner_id = ? ORDER BY created_at_ms DESC, rowid DESC",
            (owner_id,),
        )
        return [WatchlistItem(*row) for row in rows]

    async def add(self, owner_id: str, symbol: str) -> WatchlistItem:
        """Add a symbol. Raises WatchlistDuplicateError if it is already listed."""
        item = WatchlistItem(owner_id, symbol, int(time.time() * 1000))
        try:
            async with self._database.transaction() as db:
                await db.execute(
                    "INSERT INTO watchlist (owner_id, symbol, created_at_ms) "
                    "VALUES (?, ?, ?)",
                    (item.owner_id, item.symbol, item.created_at_ms),
                )
        except sqlite3.IntegrityError as exc:
            raise WatchlistDuplicateError(owner_id, symbol) from exc

        logger.info("watchlist_item_added", owner_id=owner_id, symbol=symbol)
        return item

    async def remove(self, owner_id: str, symbol: str) -> bool:
        """Remove a symbol. Returns True if it was listed."""
        async with self._database.transaction() as db:
            cursor = await db.execute(
                "DELETE FROM watchlist WHERE owner_id = ? AND symbol = ?",
                (owner_id, symbol),
            )
            removed = cursor.rowcount
        if removed:
            logger.info("watchlist_item_removed", owner_id=owner_id, symbol=symbol)
        return removed > 0
