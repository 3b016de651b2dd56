"""Data models for candles, review windows, and per-owner coin settings."""

import math
from dataclasses import asdict, dataclass
from enum import Enum

_DAY_MS = 86_400 * 1000


def normalize_symbol(symbol: str) -> str:
    """Compact storage form of a unified symbol ("BTC/USDT" -> "BTCUSDT")."""
    return symbol.replace("/", "")


def _to_float(value: object) -> float:
    return float(value) if value is not None else float("nan")


def json_dict(record: object) -> dict:
    """asdict() with NaN floats replaced by None, so the result is valid JSON."""
    return {
        key: None if isinstance(value, float) and math.isnan(value) else value
        for key, value in asdict(record).items()  # type: ignore[call-overload]
    }


@dataclass(frozen=True)
class Candle:
    """A single OHLCV candle. ``time`` is whole seconds since epoch (UTC)."""

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_ohlcv(cls, row: list) -> "Candle":
        """Build from a ccxt row [timestamp_ms, open, high, low, close, volume]."""
        return cls(
            time=int(row[0]) // 1000,
            open=_to_float(row[1]),
            high=_to_float(row[2]),
            low=_to_float(row[3]),
            close=_to_float(row[4]),
            volume=_to_float(row[5]),
        )

    def to_dict(self) -> dict:
        return json_dict(self)


class ZoneType(str, Enum):
    """Kind of price zone a user annotates on a symbol."""

    SUPPORT = "support"
    RESISTANCE = "resistance"


@dataclass
class CoinSettings:
    """Per-owner review annotation for one symbol.

    ``symbol`` is stored in compact form (see normalize_symbol).
    """

    owner_id: str
    symbol: str
    publish_time_ms: int
    zone_type: ZoneType
    zone_price: float
    created_at_ms: int | None = None
    updated_at_ms: int | None = None


@dataclass(frozen=True)
class FetchWindow:
    """Time range of candles requested for one symbol and timeframe."""

    symbol: str
    timeframe: str
    start_ms: int
    end_ms: int

    @classmethod
    def around_publish_time(
        cls,
        symbol: str,
        timeframe: str,
        publish_time_ms: int,
        days_before: int = 1,
        days_after: int = 4,
    ) -> "FetchWindow":
        """Review window anchored on a publish time: [publish - before, publish + after]."""
        return cls(
            symbol=symbol,
            timeframe=timeframe,
            start_ms=publish_time_ms - days_before * _DAY_MS,
            end_ms=publish_time_ms + days_after * _DAY_MS,
        )


@dataclass
class ChartCandles:
    """Candle series returned to the rendering layer."""

    symbol: str
    timeframe: str
    candles: list[Candle]
    cached: bool = False
