"""Simple and exponential moving averages over candle closes.

Both produce ``len(candles) - (period - 1)`` points. The first point is
computed from candles[0:period] and stamped with candles[period - 1].time.
"""

import math
from collections.abc import Sequence

from chartdesk.candles.models import Candle
from chartdesk.indicators.models import IndicatorPoint


def _check_period(name: str, period: int) -> None:
    if period < 1:
        raise ValueError(f"{name} must be a positive integer, got {period}")


def sma_values(values: Sequence[float], period: int) -> list[float]:
    """Rolling mean. result[i] covers values[i : i + period]."""
    _check_period("period", period)
    if len(values) < period:
        return []
    return [
        math.fsum(values[i : i + period]) / period
        for i in range(len(values) - period + 1)
    ]


def ema_values(values: Sequence[float], period: int) -> list[float]:
    """Exponential moving average seeded with the SMA of the first ``period`` values.

        k = 2 / (period + 1)
        EMA_t = (value_t - EMA_{t-1}) * k + EMA_{t-1}

    result[i] aligns with values[i + period - 1].
    """
    _check_period("period", period)
    if len(values) < period:
        return []

    k = 2 / (period + 1)
    current = math.fsum(values[:period]) / period
    result = [current]
    for value in values[period:]:
        current = (value - current) * k + current
        result.append(current)
    return result


def sma(candles: Sequence[Candle], period: int = 20) -> list[IndicatorPoint]:
    """Simple moving average of close prices."""
    closes = [c.close for c in candles]
    offset = period - 1
    return [
        IndicatorPoint(time=candles[i + offset].time, value=value)
        for i, value in enumerate(sma_values(closes, period))
    ]


def ema(candles: Sequence[Candle], period: int = 20) -> list[IndicatorPoint]:
    """Exponential moving average of close prices."""
    closes = [c.close for c in candles]
    offset = period - 1
    return [
        IndicatorPoint(time=candles[i + offset].time, value=value)
        for i, value in enumerate(ema_values(closes, period))
    ]
