"""Scanner configuration models."""

from __future__ import annotations

from pydantic import BaseModel

from core.models.asset import AssetSnapshot


class SniperConfig(BaseModel):
    """Sniper protocol parameters."""

    # Indicator periods
    ema_slow_period: int = 200
    ema_fast_period: int = 50
    rsi_period: int = 14
    adx_period: int = 14
    volume_period: int = 20

    # Fewer candles than this produce a "synchronizing" signal
    min_candles: int = 10

    # Gate thresholds
    adx_trend_threshold: float = 15.0
    adx_strong_threshold: float = 25.0
    volume_spike_mult: float = 1.2
    rsi_lower: float = 35.0
    rsi_upper: float = 65.0

    # Score weights
    weight_above_ema_slow: int = 25
    weight_above_ema_fast: int = 15
    weight_trend: int = 20
    weight_strong_trend: int = 10
    weight_volume_spike: int = 20
    weight_rsi_band: int = 10

    # Score bounds
    score_min: float = 5.0
    score_max: float = 100.0
    default_score_max: float = 20.0  # Cap for signals without indicator data

    # Protective levels (fixed multiples of entry)
    stop_loss_mult: float = 0.98
    take_profit_mult: float = 1.04


# Stablecoins, wrapped and pegged assets never produce useful trend signals
EXCLUDED_SYMBOLS: list[str] = [
    "usdt", "usdc", "dai", "busd", "tusd", "fdusd", "pyusd", "usdd", "frax",
    "steth", "weth", "wbtc", "paxg", "xaut", "ustc", "eusd", "ldo", "ton", "eur", "gbp",
]

EXCLUDED_NAME_TERMS: list[str] = ["usd", "tether", "wrapped"]


class UniverseFilterConfig(BaseModel):
    """Denylist applied to the market universe before evaluation.

    Symbols match case-insensitively and exactly; name terms match as
    case-insensitive substrings.
    """

    excluded_symbols: list[str] = EXCLUDED_SYMBOLS
    excluded_name_terms: list[str] = EXCLUDED_NAME_TERMS

    def is_excluded(self, asset: AssetSnapshot) -> bool:
        """Check whether an asset is filtered out of the scan."""
        symbol = asset.symbol.lower()
        if symbol in {s.lower() for s in self.excluded_symbols}:
            return True
        name = asset.name.lower()
        return any(term.lower() in name for term in self.excluded_name_terms)
