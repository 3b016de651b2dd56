"""Shared test fixtures for chartdesk."""

import pytest

from chartdesk.candles.models import Candle
from chartdesk.config import CandleSettings

# 2024-01-01T00:00:00Z
BASE_TIME_MS = 1_704_067_200_000


def make_candles(closes: list[float], start_s: int = BASE_TIME_MS // 1000, step_s: int = 3600) -> list[Candle]:
    """Build an ascending candle series with the given closes."""
    return [
        Candle(
            time=start_s + i * step_s,
            open=close,
            high=close + 1,
            low=close - 1,
            close=close,
            volume=10.0,
        )
        for i, close in enumerate(closes)
    ]


def ohlcv_rows(start_ms: int, count: int, interval_ms: int, price: float = 100.0) -> list[list]:
    """Build ccxt-format rows [ts_ms, o, h, l, c, v] starting at start_ms."""
    return [
        [start_ms + i * interval_ms, price, price + 1, price - 1, price + 0.5, 5.0]
        for i in range(count)
    ]


@pytest.fixture
def candle_settings() -> CandleSettings:
    """CandleSettings with test defaults (no inter-batch delay)."""
    return CandleSettings(batch_delay=0.0)
