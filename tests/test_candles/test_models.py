"""Tests for candle models and the publish-time review window."""

import math

from chartdesk.candles.models import Candle, FetchWindow, normalize_symbol

DAY_MS = 86_400_000


def test_from_ohlcv_converts_ms_to_whole_seconds() -> None:
    candle = Candle.from_ohlcv([1_704_067_200_999, 1, 2, 0.5, 1.5, 100])
    assert candle.time == 1_704_067_200
    assert candle == Candle(1_704_067_200, 1.0, 2.0, 0.5, 1.5, 100.0)


def test_from_ohlcv_missing_value_is_nan() -> None:
    candle = Candle.from_ohlcv([1_704_067_200_000, 1, 2, 0.5, 1.5, None])
    assert math.isnan(candle.volume)


def test_window_around_publish_time() -> None:
    publish = 1_704_067_200_000
    window = FetchWindow.around_publish_time("BTC/USDT", "1h", publish)

    assert window.start_ms == publish - DAY_MS
    assert window.end_ms == publish + 4 * DAY_MS
    assert (window.end_ms - window.start_ms) / 60_000 == 7200


def test_window_custom_days() -> None:
    window = FetchWindow.around_publish_time("BTC/USDT", "1h", 0, days_before=2, days_after=1)
    assert (window.start_ms, window.end_ms) == (-2 * DAY_MS, DAY_MS)


def test_normalize_symbol() -> None:
    assert normalize_symbol("ETH/USDT") == "ETHUSDT"
    assert normalize_symbol("ETHUSDT") == "ETHUSDT"
