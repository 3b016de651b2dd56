"""RSI and MACD over candle closes.

Warm-up offsets (leading candles consumed before the first output):
- RSI(period): ``period`` -- one extra candle for the first price change.
- MACD(fast, slow, signal): ``slow + signal - 2``.

Output point i is stamped with candles[offset + i].time.
"""

from collections.abc import Sequence

from chartdesk.candles.models import Candle
from chartdesk.indicators.models import IndicatorPoint, MACDPoint, or_zero
from chartdesk.indicators.moving_averages import ema_values


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def rsi(candles: Sequence[Candle], period: int = 14) -> list[IndicatorPoint]:
    """Relative Strength Index with Wilder smoothing.

    The first average gain/loss is the simple mean over the first ``period``
    price changes; later values use
    ``avg = (prev_avg * (period - 1) + current) / period``.
    """
    if period < 1:
        raise ValueError(f"period must be a positive integer, got {period}")
    if len(candles) < period + 1:
        return []

    closes = [c.close for c in candles]
    changes = [closes[i] - closes[i - 1] for i in range(1, len(closes))]

    avg_gain = sum(max(ch, 0.0) for ch in changes[:period]) / period
    avg_loss = sum(max(-ch, 0.0) for ch in changes[:period]) / period
    points = [
        IndicatorPoint(time=candles[period].time, value=_rsi_from_averages(avg_gain, avg_loss))
    ]

    for i in range(period, len(changes)):
        change = changes[i]
        avg_gain = (avg_gain * (period - 1) + max(change, 0.0)) / period
        avg_loss = (avg_loss * (period - 1) + max(-change, 0.0)) / period
        # changes[i] is closes[i + 1] - closes[i]
        points.append(
            IndicatorPoint(
                time=candles[i + 1].time,
                value=_rsi_from_averages(avg_gain, avg_loss),
            )
        )

    return points


def macd(
    candles: Sequence[Candle],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> list[MACDPoint]:
    """Moving Average Convergence Divergence using EMA for both line and signal.

    macd = EMA(fast) - EMA(slow), signal = EMA(signal) of the macd line,
    histogram = macd - signal. Only points with a defined signal are
    returned. NaN sub-fields are reported as 0.0.
    """
    for name, value in (
        ("fast_period", fast_period),
        ("slow_period", slow_period),
        ("signal_period", signal_period),
    ):
        if value < 1:
            raise ValueError(f"{name} must be a positive integer, got {value}")
    if fast_period > slow_period:
        raise ValueError("fast_period must not exceed slow_period")

    offset = slow_period + signal_period - 2
    if len(candles) <= offset:
        return []

    closes = [c.close for c in candles]
    fast_line = ema_values(closes, fast_period)
    slow_line = ema_values(closes, slow_period)

    # fast_line starts at candle fast-1, slow_line at slow-1
    shift = slow_period - fast_period
    macd_line = [fast_line[i + shift] - slow for i, slow in enumerate(slow_line)]
    signal_line = ema_values(macd_line, signal_period)

    points = []
    for i, signal in enumerate(signal_line):
        value = macd_line[i + signal_period - 1]
        points.append(
            MACDPoint(
                time=candles[i + offset].time,
                macd=or_zero(value),
                signal=or_zero(signal),
                histogram=or_zero(value - signal),
            )
        )
    return points
