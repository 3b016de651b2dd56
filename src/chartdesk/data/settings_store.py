"""Typed SQLite read/write abstraction for per-owner coin settings.

The candle pipeline only reads from this store to derive review windows;
writes come from the settings API.
"""

import time

from chartdesk.candles.models import CoinSettings, ZoneType, normalize_symbol
from chartdesk.data.database import ChartDatabase
from chartdesk.logging import get_logger

logger = get_logger(__name__)

_SELECT_COLUMNS = (
    "SELECT owner_id, symbol, publish_time_ms, zone_type, zone_price, "
    "created_at_ms, updated_at_ms FROM coin_settings"
)


def _row_to_settings(row: tuple) -> CoinSettings:
    return CoinSettings(
        owner_id=row[0],
        symbol=row[1],
        publish_time_ms=row[2],
        zone_type=ZoneType(row[3]),
        zone_price=row[4],
        created_at_ms=row[5],
        updated_at_ms=row[6],
    )


class CoinSettingsStore:
    """Async store for (owner, symbol) review settings.

    Symbols are normalized to compact form on every call, so "BTC/USDT"
    and "BTCUSDT" address the same row.
    """

    def __init__(self, database: ChartDatabase) -> None:
        self._database = database

    async def get(self, owner_id: str, symbol: str) -> CoinSettings | None:
        """Return settings for an owner and symbol, or None."""
        row = await self._database.fetchone(
            f"{_SELECT_COLUMNS} WHERE owner_id = ? AND symbol = ?",
            (owner_id, normalize_symbol(symbol)),
        )
        if row is None:
            return None
        return _row_to_settings(row)

    async def list_for_owner(self, owner_id: str) -> list[CoinSettings]:
        """Return all settings for an owner, most recently updated first."""
        rows = await self._database.fetchall(
            f"{_SELECT_COLUMNS} WHERE owner_id = ? ORDER BY updated_at_ms DESC",
            (owner_id,),
        )
        return [_row_to_settings(row) for row in rows]

    async def upsert(self, settings: CoinSettings) -> CoinSettings:
        """Insert or update settings, preserving the original created_at_ms."""
        now_ms = int(time.time() * 1000)
        symbol = normalize_symbol(settings.symbol)
        async with self._database.transaction() as db:
            await db.execute(
                "INSERT OR REPLACE INTO coin_settings "
                "(owner_id, symbol, publish_time_ms, zone_type, zone_price, "
                "created_at_ms, updated_at_ms) "
                "VALUES (?, ?, ?, ?, ?, "
                "COALESCE((SELECT created_at_ms FROM coin_settings "
                "WHERE owner_id = ? AND symbol = ?), ?), ?)",
                (
                    settings.owner_id,
                    symbol,
                    settings.publish_time_ms,
                    ZoneType(settings.zone_type).value,
                    settings.zone_price,
                    settings.owner_id,
                    symbol,
                    now_ms,
                    now_ms,
                ),
            )

        logger.info(
            "coin_settings_saved",
            owner_id=settings.owner_id,
            symbol=symbol,
            publish_time_ms=settings.publish_time_ms,
        )
        stored = await self.get(settings.owner_id, symbol)
        assert stored is not None
        return stored

    async def delete(self, owner_id: str, symbol: str) -> bool:
        """Delete settings for an owner and symbol. Returns True if a row was removed."""
        async with self._database.transaction() as db:
            cursor = await db.execute(
                "DELETE FROM coin_settings WHERE owner_id = ? AND symbol = ?",
                (owner_id, normalize_symbol(symbol)),
            )
            removed = cursor.rowcount
        return removed > 0
