"""Technical indicators (pure math, no I/O)."""

from core.indicators.indicators import (
    sma,
    ema,
    rsi,
    adx,
    true_range,
    directional_movement,
    IndicatorCalculator,
    IndicatorSnapshot,
)

__all__ = [
    "sma",
    "ema",
    "rsi",
    "adx",
    "true_range",
    "directional_movement",
    "IndicatorCalculator",
    "IndicatorSnapshot",
]
