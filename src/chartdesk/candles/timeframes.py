"""Timeframe granularity lookup.

Unknown timeframe keys fall back to one hour rather than being rejected.
"""

from types import MappingProxyType

from chartdesk.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MINUTES_PER_CANDLE = 60
MS_PER_MINUTE = 60_000

TIMEFRAME_MINUTES = MappingProxyType(
    {
        "1m": 1,
        "5m": 5,
        "15m": 15,
        "1h": 60,
        "4h": 240,
        "1d": 1440,
    }
)


def minutes_per_candle(timeframe: str) -> int:
    """Return candle duration in minutes, defaulting to 60 for unknown keys."""
    minutes = TIMEFRAME_MINUTES.get(timeframe)
    if minutes is None:
        logger.warning(
            "unknown_timeframe_defaulted",
            timeframe=timeframe,
            minutes=DEFAULT_MINUTES_PER_CANDLE,
        )
        return DEFAULT_MINUTES_PER_CANDLE
    return minutes
