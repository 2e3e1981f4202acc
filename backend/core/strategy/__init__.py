"""Scan strategies.

Public API:
- SignalEvaluator: Protocol that all strategies must implement
- AssetOutcome: Per-asset success/failure result
- SniperStrategy: The built-in sniper protocol evaluator
"""

from core.strategy.protocol import AssetOutcome, SignalEvaluator
from core.strategy.sniper import SniperStrategy, SNIPER_STRATEGY_NAME

__all__ = [
    "AssetOutcome",
    "SignalEvaluator",
    "SniperStrategy",
    "SNIPER_STRATEGY_NAME",
]
