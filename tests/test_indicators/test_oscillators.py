"""Tests for RSI and MACD: warm-up offsets, alignment, and edge cases."""

import math

import pytest

from chartdesk.indicators.oscillators import macd, rsi
from conftest import make_candles


def _zigzag(n: int) -> list[float]:
    return [100.0 + (i % 5) * 1.5 - (i % 3) for i in range(n)]


class TestRsi:
    def test_offset_is_period(self) -> None:
        """RSI consumes one extra candle for the first price change."""
        candles = make_candles(_zigzag(40))
        result = rsi(candles, 14)

        assert len(result) == 40 - 14
        for i, point in enumerate(result):
            assert point.time == candles[i + 14].time

    def test_all_gains_is_100(self) -> None:
        candles = make_candles([float(i) for i in range(1, 21)])
        result = rsi(candles, 14)
        assert all(p.value == 100.0 for p in result)

    def test_all_losses_is_0(self) -> None:
        candles = make_candles([float(i) for i in range(20, 0, -1)])
        result = rsi(candles, 14)
        assert all(p.value == pytest.approx(0.0) for p in result)

    def test_known_first_value(self) -> None:
        """Changes +1, -1, +2 with period 3: avg_gain = 1, avg_loss = 1/3, RS = 3, RSI = 75."""
        candles = make_candles([10.0, 11.0, 10.0, 12.0])
        result = rsi(candles, 3)

        assert len(result) == 1
        assert result[0].time == candles[3].time
        assert result[0].value == pytest.approx(75.0)

    def test_wilder_smoothing_second_value(self) -> None:
        """Next change -1: avg_gain = (1*2 + 0)/3, avg_loss = (1/3*2 + 1)/3."""
        candles = make_candles([10.0, 11.0, 10.0, 12.0, 11.0])
        result = rsi(candles, 3)

        avg_gain = 2 / 3
        avg_loss = (2 / 3 + 1) / 3
        expected = 100 - 100 / (1 + avg_gain / avg_loss)
        assert result[1].value == pytest.approx(expected)

    @pytest.mark.parametrize("length", [0, 5, 14])
    def test_needs_period_plus_one_candles(self, length: int) -> None:
        assert rsi(make_candles(_zigzag(length)), 14) == []


class TestMacd:
    def test_offset_scenario_100_candles(self) -> None:
        """MACD(12, 26, 9) over 100 candles: offset 33, 67 points."""
        candles = make_candles(_zigzag(100))
        result = macd(candles, 12, 26, 9)

        assert len(result) == 67
        assert result[0].time == candles[33].time
        assert result[-1].time == candles[-1].time

    def test_histogram_is_macd_minus_signal(self) -> None:
        candles = make_candles([100.0 + math.sin(i / 4) * 5 for i in range(80)])
        for point in macd(candles):
            assert point.histogram == pytest.approx(point.macd - point.signal)

    def test_constant_series_is_flat_zero(self) -> None:
        candles = make_candles([50.0] * 60)
        for point in macd(candles):
            assert point.macd == pytest.approx(0.0)
            assert point.signal == pytest.approx(0.0)
            assert point.histogram == pytest.approx(0.0)

    def test_minimum_length(self) -> None:
        """slow + signal - 1 candles produce exactly one point."""
        assert macd(make_candles(_zigzag(33)), 12, 26, 9) == []
        result = macd(make_candles(_zigzag(34)), 12, 26, 9)
        assert len(result) == 1

    def test_nan_close_reported_as_zero(self) -> None:
        closes = _zigzag(40)
        closes[-1] = float("nan")
        result = macd(make_candles(closes), 12, 26, 9)

        assert result[-1].macd == 0.0
        assert result[-1].signal == 0.0
        assert result[-1].histogram == 0.0

    def test_fast_longer_than_slow_raises(self) -> None:
        with pytest.raises(ValueError):
            macd(make_candles(_zigzag(60)), 26, 12, 9)
