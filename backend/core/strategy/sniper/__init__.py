"""Sniper protocol strategy package."""

from core.strategy.sniper.generator import SniperStrategy
from core.strategy.sniper.models import (
    SNIPER_STRATEGY_NAME,
    REASON_LOCKED,
    REASON_SYNCHRONIZING,
    REASON_CONNECTION_ERROR,
    REASON_BELOW_EMA200,
    REASON_ADX_LOW,
    REASON_LOW_VOLUME,
    REASON_RSI_ADJUSTING,
)

__all__ = [
    "SniperStrategy",
    "SNIPER_STRATEGY_NAME",
    "REASON_LOCKED",
    "REASON_SYNCHRONIZING",
    "REASON_CONNECTION_ERROR",
    "REASON_BELOW_EMA200",
    "REASON_ADX_LOW",
    "REASON_LOW_VOLUME",
    "REASON_RSI_ADJUSTING",
]
