"""Domain models shared by the scanner core and the app layer."""

from core.models.asset import AssetSnapshot
from core.models.candle import Candle
from core.models.config import (
    EXCLUDED_NAME_TERMS,
    EXCLUDED_SYMBOLS,
    SniperConfig,
    UniverseFilterConfig,
)
from core.models.signal import SignalStatus, TradeSignal

__all__ = [
    "AssetSnapshot",
    "Candle",
    "EXCLUDED_NAME_TERMS",
    "EXCLUDED_SYMBOLS",
    "SniperConfig",
    "UniverseFilterConfig",
    "SignalStatus",
    "TradeSignal",
]
