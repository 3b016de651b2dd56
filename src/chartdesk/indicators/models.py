"""Indicator output points. Each point carries the time of the candle it closes on."""

import math
from dataclasses import dataclass

from chartdesk.candles.models import json_dict


def or_zero(value: float) -> float:
    """Replace NaN with 0.0 (field-level fallback for multi-value indicators)."""
    return 0.0 if math.isnan(value) else value


@dataclass(frozen=True)
class IndicatorPoint:
    """Single-line indicator value (SMA, EMA, RSI)."""

    time: int
    value: float

    def to_dict(self) -> dict:
        return json_dict(self)


@dataclass(frozen=True)
class MACDPoint:
    time: int
    macd: float
    signal: float
    histogram: float

    def to_dict(self) -> dict:
        return json_dict(self)


@dataclass(frozen=True)
class BollingerPoint:
    time: int
    upper: float
    middle: float
    lower: float

    def to_dict(self) -> dict:
        return json_dict(self)
