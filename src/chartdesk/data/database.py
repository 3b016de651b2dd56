"""Async SQLite database manager for coin settings, watchlists and cached candles.

Uses aiosqlite for non-blocking database operations with WAL mode
for concurrent read/write performance. Every store shares the one
connection, so statements go through ``transaction()`` or the locked
read helpers to keep one store's commit or rollback from touching
another store's pending writes.
"""

import asyncio
import os
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from typing import Any, Self

import aiosqlite

from chartdesk.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 2

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS coin_settings (
    owner_id TEXT NOT NULL,
    symbol TEXT NOT NULL,
    publish_time_ms INTEGER NOT NULL,
    zone_type TEXT NOT NULL,
    zone_price REAL NOT NULL,
    created_at_ms INTEGER NOT NULL,
    updated_at_ms INTEGER NOT NULL,
    PRIMARY KEY (owner_id, symbol)
);

CREATE TABLE IF NOT EXISTS candle_cache (
    owner_id TEXT NOT NULL,
    symbol TEXT NOT NULL,
    timeframe TEXT NOT NULL,
    time INTEGER NOT NULL,
    open REAL,
    high REAL,
    low REAL,
    close REAL,
    volume REAL,
    PRIMARY KEY (owner_id, symbol, timeframe, time)
);

CREATE TABLE IF NOT EXISTS watchlist (
    owner_id TEXT NOT NULL,
    symbol TEXT NOT NULL,
    created_at_ms INTEGER NOT NULL,
    PRIMARY KEY (owner_id, symbol)
);
"""

_CREATE_INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_coin_settings_owner
    ON coin_settings(owner_id, updated_at_ms);

CREATE INDEX IF NOT EXISTS idx_watchlist_owner
    ON watchlist(owner_id, created_at_ms);
"""


class ChartDatabase:
    """Async SQLite connection manager.

    Manages database lifecycle including schema creation, WAL mode
    configuration, and clean resource cleanup.

    Usage:
        async with ChartDatabase("data/chartdesk.db") as database:
            cache = CandleCache(database)
    """

    def __init__(self, db_path: str = "data/chartdesk.db") -> None:
        self._db_path = db_path
        self._connection: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def db(self) -> aiosqlite.Connection:
        """Access the raw aiosqlite connection.

        Raises RuntimeError if not connected.
        """
        if self._connection is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Run a unit of writes under the connection lock.

        Commits when the block exits cleanly and rolls back when it raises.
        The lock is not reentrant: do not call other store methods inside.
        """
        async with self._lock:
            db = self.db
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    async def fetchone(self, query: str, params: Iterable[Any] = ()) -> tuple | None:
        """Run a read under the connection lock and return the first row."""
        async with self._lock:
            cursor = await self.db.execute(query, tuple(params))
            return await cursor.fetchone()

    async def fetchall(self, query: str, params: Iterable[Any] = ()) -> list[tuple]:
        """Run a read under the connection lock and return every row."""
        async with self._lock:
            cursor = await self.db.execute(query, tuple(params))
            return list(await cursor.fetchall())

    async def connect(self) -> None:
        """Open database connection, configure pragmas, and create schema.

        Creates the parent directory if it does not exist.
        """
        db_dir = os.path.dirname(self._db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        self._connection = await aiosqlite.connect(self._db_path)

        await self._connection.execute("PRAGMA journal_mode=WAL")
        await self._connection.execute("PRAGMA synchronous=NORMAL")

        await self._create_tables()
        await self._ensure_schema_version()

        logger.info("chart_db_connected", db_path=self._db_path)

    async def close(self) -> None:
        """Close the database connection if open."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            logger.info("chart_db_closed", db_path=self._db_path)

    async def _create_tables(self) -> None:
        assert self._connection is not None
        await self._connection.executescript(_CREATE_TABLES_SQL)
        await self._connection.executescript(_CREATE_INDEXES_SQL)
        await self._connection.commit()

    async def _ensure_schema_version(self) -> None:
        assert self._connection is not None
        cursor = await self._connection.execute(
            "SELECT version FROM schema_version LIMIT 1"
        )
        row = await cursor.fetchone()
        if row is None:
            await self._connection.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            await self._connection.commit()
            logger.info("schema_version_set", version=SCHEMA_VERSION)
        elif row[0] < SCHEMA_VERSION:
            # New tables are created above with IF NOT EXISTS.
            await self._connection.execute(
                "UPDATE schema_version SET version = ?", (SCHEMA_VERSION,)
            )
            await self._connection.commit()
            logger.info("schema_version_upgraded", from_version=row[0], version=SCHEMA_VERSION)

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        await self.close()
