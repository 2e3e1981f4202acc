"""Scanner profile loaded from scanner.yaml.

Supports:
- Overriding sniper thresholds, weights and periods
- Replacing the universe denylist
- No YAML file = built-in defaults
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, model_validator

from core.models.config import SniperConfig, UniverseFilterConfig

logger = logging.getLogger(__name__)


class ScannerProfile(BaseModel):
    """Top-level scanner.yaml configuration."""

    sniper: SniperConfig = SniperConfig()
    universe_filter: UniverseFilterConfig = UniverseFilterConfig()

    @model_validator(mode="after")
    def _validate(self):
        sniper = self.sniper
        if sniper.min_candles < 1:
            raise ValueError(f"min_candles must be >= 1, got {sniper.min_candles}")
        if sniper.score_min > sniper.score_max:
            raise ValueError(
                f"score_min ({sniper.score_min}) must not exceed "
                f"score_max ({sniper.score_max})"
            )
        if sniper.rsi_lower >= sniper.rsi_upper:
            raise ValueError(
                f"rsi_lower ({sniper.rsi_lower}) must be below "
                f"rsi_upper ({sniper.rsi_upper})"
            )
        return self


_DEFAULT_PATH = Path(__file__).parent.parent / "scanner.yaml"


def load_scanner_profile(path: Path | None = None) -> ScannerProfile:
    """Load scanner profile from YAML file.

    Falls back to defaults if the file doesn't exist.
    """
    config_path = path or _DEFAULT_PATH

    if not config_path.exists():
        logger.info("No scanner.yaml found at %s, using defaults", config_path)
        return ScannerProfile()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    profile = ScannerProfile(**raw)
    logger.info(
        "Loaded scanner profile: %d excluded symbols, %d excluded name terms",
        len(profile.universe_filter.excluded_symbols),
        len(profile.universe_filter.excluded_name_terms),
    )
    return profile
