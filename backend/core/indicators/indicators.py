"""Technical indicators for the scanner.

Every function returns a single float for the latest bar and degrades to a
defined sentinel on short history or zero denominators, so a freshly listed
asset still gets a (low confidence) reading instead of an error.
"""

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from core.models.candle import Candle
from core.models.config import SniperConfig


def sma(values: Sequence[float], period: int) -> float:
    """
    Calculate Simple Moving Average of the last ``period`` values.

    Args:
        values: Sequence of values
        period: SMA period

    Returns:
        Mean of the trailing window, or the last value (0.0 if empty)
        when there is not enough data
    """
    if period <= 0 or len(values) < period:
        return float(values[-1]) if len(values) > 0 else 0.0

    window = np.asarray(values[-period:], dtype=np.float64)
    return float(np.mean(window))


def ema(values: Sequence[float], period: int) -> float:
    """
    Calculate Exponential Moving Average.

    Seeded with the first value, smoothed with k = 2 / (period + 1).

    Args:
        values: Sequence of price values
        period: EMA period

    Returns:
        Latest EMA value; the last value unchanged when there is not enough data
    """
    if len(values) == 0:
        return 0.0
    if len(values) < period:
        return float(values[-1])

    k = 2.0 / (period + 1)
    result = float(values[0])
    for value in values[1:]:
        result = (float(value) - result) * k + result
    return result


def rsi(values: Sequence[float], period: int = 14) -> float:
    """
    Calculate Relative Strength Index over the last ``period`` deltas.

    Args:
        values: Sequence of close prices
        period: RSI period

    Returns:
        RSI in [0, 100]; 50 on short history, 100 when there were no losses
    """
    if period <= 0 or len(values) <= period:
        return 50.0

    deltas = np.diff(np.asarray(values[-(period + 1):], dtype=np.float64))
    gains = float(deltas[deltas > 0].sum())
    losses = float(-deltas[deltas < 0].sum())
    if np.isnan(deltas).any():
        losses = math.nan

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0:
        return 100.0

    value = 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)
    return 50.0 if math.isnan(value) else value


def true_range(candles: Sequence[Candle]) -> list[float]:
    """
    Calculate True Range for each adjacent candle pair.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))

    Returns:
        List of len(candles) - 1 values
    """
    result = []
    for prev, cur in zip(candles, candles[1:]):
        result.append(
            max(
                cur.high - cur.low,
                abs(cur.high - prev.close),
                abs(cur.low - prev.close),
            )
        )
    return result


def directional_movement(
    candles: Sequence[Candle],
) -> tuple[list[float], list[float]]:
    """
    Calculate +DM and -DM for each adjacent candle pair.

    Returns:
        Tuple of (plus_dm, minus_dm) lists, each len(candles) - 1 long
    """
    plus_dm = []
    minus_dm = []
    for prev, cur in zip(candles, candles[1:]):
        up_move = cur.high - prev.high
        down_move = prev.low - cur.low
        plus_dm.append(up_move if up_move > down_move and up_move > 0 else 0.0)
        minus_dm.append(down_move if down_move > up_move and down_move > 0 else 0.0)
    return plus_dm, minus_dm


def adx(candles: Sequence[Candle], period: int = 14) -> float:
    """
    Calculate the directional index used as the trend-strength reading.

    TR, +DM and -DM are smoothed with ``ema`` at an effective period that
    never exceeds the available history.

    Args:
        candles: Candles in ascending time order
        period: Smoothing period

    Returns:
        Value in [0, 100]; 0 with fewer than 5 candles or a flat market
    """
    if len(candles) < 5:
        return 0.0

    effective_period = min(period, len(candles) - 1)

    tr = true_range(candles)
    plus_dm, minus_dm = directional_movement(candles)

    smoothed_tr = ema(tr, effective_period)
    smoothed_plus = ema(plus_dm, effective_period)
    smoothed_minus = ema(minus_dm, effective_period)

    if smoothed_tr == 0:
        return 0.0

    plus_di = 100.0 * smoothed_plus / smoothed_tr
    minus_di = 100.0 * smoothed_minus / smoothed_tr

    denominator = plus_di + minus_di
    if denominator == 0:
        return 0.0

    dx = 100.0 * abs(plus_di - minus_di) / denominator
    return 0.0 if math.isnan(dx) else dx


# =============================================================================
# IndicatorCalculator class
# =============================================================================

@dataclass(slots=True)
class IndicatorSnapshot:
    """Indicator readings for the latest bar of one candle series."""

    ema_slow: float
    ema_fast: float
    rsi: float
    adx: float
    avg_volume: float
    current_volume: float


class IndicatorCalculator:
    """Calculator for all technical indicators needed by the sniper strategy."""

    def __init__(self, config: SniperConfig | None = None):
        self.config = config or SniperConfig()

    def calculate_latest(self, candles: Sequence[Candle]) -> IndicatorSnapshot:
        """
        Calculate indicators for the latest bar.

        Args:
            candles: Candles in ascending time order (at least one)

        Returns:
            IndicatorSnapshot for the last candle
        """
        closes = [c.close for c in candles]
        volumes = [c.volume for c in candles]

        return IndicatorSnapshot(
            ema_slow=ema(closes, self.config.ema_slow_period),
            ema_fast=ema(closes, self.config.ema_fast_period),
            rsi=rsi(closes, self.config.rsi_period),
            adx=adx(candles, self.config.adx_period),
            avg_volume=sma(volumes, self.config.volume_period),
            current_volume=volumes[-1] if volumes else 0.0,
        )
