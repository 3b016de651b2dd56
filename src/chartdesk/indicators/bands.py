"""Bollinger Bands over candle closes."""

import math
from collections.abc import Sequence

from chartdesk.candles.models import Candle
from chartdesk.indicators.models import BollingerPoint, or_zero


def bollinger_bands(
    candles: Sequence[Candle],
    period: int = 20,
    std_dev: float = 2.0,
) -> list[BollingerPoint]:
    """Compute Bollinger Bands.

    middle = SMA(close, period)
    upper/lower = middle +/- std_dev * sigma, sigma the population standard
    deviation of the same window.

    Returns ``len(candles) - (period - 1)`` points, the first stamped with
    candles[period - 1].time. NaN band values are reported as 0.0.
    """
    if period < 1:
        raise ValueError(f"period must be a positive integer, got {period}")
    if len(candles) < period:
        return []

    closes = [c.close for c in candles]
    points = []
    for end in range(period, len(closes) + 1):
        window = closes[end - period : end]
        middle = math.fsum(window) / period
        sigma = math.sqrt(math.fsum((x - middle) ** 2 for x in window) / period)
        points.append(
            BollingerPoint(
                time=candles[end - 1].time,
                upper=or_zero(middle + std_dev * sigma),
                middle=or_zero(middle),
                lower=or_zero(middle - std_dev * sigma),
            )
        )
    return points
