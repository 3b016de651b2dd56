"""Technical indicators computed on demand from a candle series.

Pure functions of the close prices; nothing here is cached or persisted.
A series shorter than an indicator's warm-up yields an empty list.
"""

from chartdesk.indicators.bands import bollinger_bands
from chartdesk.indicators.models import BollingerPoint, IndicatorPoint, MACDPoint
from chartdesk.indicators.moving_averages import ema, ema_values, sma, sma_values
from chartdesk.indicators.oscillators import macd, rsi

__all__ = [
    "BollingerPoint",
    "IndicatorPoint",
    "MACDPoint",
    "bollinger_bands",
    "ema",
    "ema_values",
    "macd",
    "rsi",
    "sma",
    "sma_values",
]
