"""Tests for SMA and EMA: values, warm-up alignment, and short-input behavior."""

import pytest

from chartdesk.indicators.moving_averages import ema, ema_values, sma, sma_values
from conftest import make_candles


class TestSmaValues:
    def test_known_values(self) -> None:
        assert sma_values([1.0, 2.0, 3.0, 4.0, 5.0], 3) == [2.0, 3.0, 4.0]

    def test_period_one_is_identity(self) -> None:
        assert sma_values([4.0, 5.0, 6.0], 1) == [4.0, 5.0, 6.0]

    def test_short_input_returns_empty(self) -> None:
        assert sma_values([1.0, 2.0], 3) == []

    def test_non_positive_period_raises(self) -> None:
        with pytest.raises(ValueError):
            sma_values([1.0, 2.0], 0)


class TestEmaValues:
    def test_seeded_with_sma(self) -> None:
        """k = 2 / (3 + 1) = 0.5, seed = mean(1, 2, 3) = 2.

        EMA[1] = (4 - 2) * 0.5 + 2 = 3
        EMA[2] = (5 - 3) * 0.5 + 3 = 4
        """
        assert ema_values([1.0, 2.0, 3.0, 4.0, 5.0], 3) == [2.0, 3.0, 4.0]

    def test_constant_series(self) -> None:
        result = ema_values([7.0] * 10, 4)
        assert result == pytest.approx([7.0] * 7)

    def test_short_input_returns_empty(self) -> None:
        assert ema_values([1.0], 2) == []


class TestSma:
    def test_first_point_stamped_with_last_window_candle(self) -> None:
        """A value computed from candles[0..period-1] carries candles[period-1].time."""
        candles = make_candles([float(i) for i in range(1, 11)])
        result = sma(candles, 4)

        assert len(result) == 10 - 3
        assert result[0].time == candles[3].time
        assert result[0].value == pytest.approx(2.5)

    def test_alignment_for_every_point(self) -> None:
        candles = make_candles([float(i % 7) for i in range(30)])
        result = sma(candles, 5)
        for i, point in enumerate(result):
            assert point.time == candles[i + 4].time

    @pytest.mark.parametrize("length", [0, 1, 19])
    def test_shorter_than_period_returns_empty(self, length: int) -> None:
        assert sma(make_candles([1.0] * length), 20) == []

    def test_exactly_period_returns_one_point(self) -> None:
        candles = make_candles([2.0] * 20)
        result = sma(candles, 20)
        assert len(result) == 1
        assert result[0].time == candles[-1].time


class TestEma:
    def test_length_and_alignment(self) -> None:
        candles = make_candles([float(i) for i in range(50)])
        result = ema(candles, 20)

        assert len(result) == 50 - 19
        assert result[0].time == candles[19].time
        assert result[-1].time == candles[-1].time

    def test_first_value_is_sma_seed(self) -> None:
        candles = make_candles([float(i) for i in range(1, 21)])
        result = ema(candles, 20)
        assert result[0].value == pytest.approx(10.5)

    def test_shorter_than_period_returns_empty(self) -> None:
        assert ema(make_candles([1.0] * 5), 20) == []
