"""Candle retrieval pipeline.

Candle models, the timeframe lookup table, the single-request fetcher, and
the range assembler that paginates, de-duplicates, and clips a window.
"""

from chartdesk.candles.assembler import BatchPlan, RangeAssembler, merge_candles, plan_batches
from chartdesk.candles.fetcher import CandleFetcher
from chartdesk.candles.models import (
    Candle,
    ChartCandles,
    CoinSettings,
    FetchWindow,
    ZoneType,
    normalize_symbol,
)
from chartdesk.candles.timeframes import TIMEFRAME_MINUTES, minutes_per_candle

__all__ = [
    "BatchPlan",
    "Candle",
    "CandleFetcher",
    "ChartCandles",
    "CoinSettings",
    "FetchWindow",
    "RangeAssembler",
    "TIMEFRAME_MINUTES",
    "ZoneType",
    "merge_candles",
    "minutes_per_candle",
    "normalize_symbol",
    "plan_batches",
]
