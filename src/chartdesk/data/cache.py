"""Per-owner candle series cache backed by SQLite.

A cache entry is the full assembled series for one (owner, symbol, timeframe)
key. Entries are only ever replaced whole: put() deletes every row for the key
and inserts the new series inside one transaction.
"""

from chartdesk.candles.models import Candle
from chartdesk.data.database import ChartDatabase
from chartdesk.logging import get_logger

logger = get_logger(__name__)


def _from_db(value: float | None) -> float:
    # SQLite stores a NaN written to a REAL column as NULL.
    return float("nan") if value is None else float(value)


class CandleCache:
    """Keyed candle series store.

    Reads and replaces go through the database's shared lock, so a reader
    never sees the gap between a replace's DELETE and its INSERT.

    An empty series is never stored: put() with no candles removes the
    entry, and the next get() returns None.

    Usage:
        cache = CandleCache(database)
        await cache.put("user-1", "BTCUSDT", "1h", candles)
        candles = await cache.get("user-1", "BTCUSDT", "1h")
    """

    def __init__(self, database: ChartDatabase) -> None:
        self._database = database

    async def get(self, owner_id: str, symbol: str, timeframe: str) -> list[Candle] | None:
        """Return the cached series ascending by time, or None if no entry exists."""
        rows = await self._database.fetchall(
            "SELECT time, open, high, low, close, volume FROM candle_cache "
            "WHERE owner_id = ? AND symbol = ? AND timeframe = ? "
            "ORDER BY time ASC",
            (owner_id, symbol, timeframe),
        )
        if not rows:
            return None

        return [
            Candle(
                time=row[0],
                open=_from_db(row[1]),
                high=_from_db(row[2]),
                low=_from_db(row[3]),
                close=_from_db(row[4]),
                volume=_from_db(row[5]),
            )
            for row in rows
        ]

    async def put(
        self, owner_id: str, symbol: str, timeframe: str, candles: list[Candle]
    ) -> int:
        """Atomically replace the entry for a key. Returns rows written.

        Putting an empty series leaves the key without an entry.
        """
        data = [
            (owner_id, symbol, timeframe, c.time, c.open, c.high, c.low, c.close, c.volume)
            for c in candles
        ]

        async with self._database.transaction() as db:
            await db.execute(
                "DELETE FROM candle_cache "
                "WHERE owner_id = ? AND symbol = ? AND timeframe = ?",
                (owner_id, symbol, timeframe),
            )
            if data:
                await db.executemany(
                    "INSERT OR REPLACE INTO candle_cache "
                    "(owner_id, symbol, timeframe, time, open, high, low, close, volume) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    data,
                )

        logger.info(
            "candle_cache_replaced",
            owner_id=owner_id,
            symbol=symbol,
            timeframe=timeframe,
            rows=len(data),
        )
        return len(data)

    async def invalidate(
        self, owner_id: str, symbol: str, timeframe: str | None = None
    ) -> int:
        """Drop the entry for a key, or every timeframe of a symbol when timeframe is None.

        Returns the number of rows removed.
        """
        if timeframe is None:
            query = "DELETE FROM candle_cache WHERE owner_id = ? AND symbol = ?"
            params: tuple = (owner_id, symbol)
        else:
            query = (
                "DELETE FROM candle_cache "
                "WHERE owner_id = ? AND symbol = ? AND timeframe = ?"
            )
            params = (owner_id, symbol, timeframe)

        async with self._database.transaction() as db:
            cursor = await db.execute(query, params)
            removed = cursor.rowcount

        logger.info(
            "candle_cache_invalidated",
            owner_id=owner_id,
            symbol=symbol,
            timeframe=timeframe,
            rows=removed,
        )
        return removed
