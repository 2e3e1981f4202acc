"""Evaluator protocol defining the interface scan strategies implement.

This module provides:
- AssetOutcome: per-asset result of the fetch-and-evaluate step
- SignalEvaluator: Runtime-checkable Protocol that strategies must satisfy
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from core.models.asset import AssetSnapshot
from core.models.candle import Candle
from core.models.signal import TradeSignal


# ---------------------------------------------------------------------------
# AssetOutcome: success/failure variant produced for every scanned asset
# ---------------------------------------------------------------------------
@dataclass
class AssetOutcome:
    """Result of fetching and evaluating one asset.

    Attributes:
        asset: The asset that was scanned.
        signal: Evaluated signal, if evaluation succeeded.
        error: Description of the failure, if it did not.
    """

    asset: AssetSnapshot
    signal: TradeSignal | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.signal is not None


# ---------------------------------------------------------------------------
# SignalEvaluator Protocol
# ---------------------------------------------------------------------------
@runtime_checkable
class SignalEvaluator(Protocol):
    """Protocol that all scan strategies must implement.

    Evaluators are pure: the same snapshot and candles always give the
    same signal, and no state is kept between calls.
    """

    @property
    def name(self) -> str:
        """Unique strategy identifier (e.g., 'sniper')."""
        ...

    @property
    def version(self) -> str:
        """Strategy version string (e.g., '1.0.0')."""
        ...

    def evaluate(
        self,
        asset: AssetSnapshot,
        candles: Sequence[Candle],
    ) -> TradeSignal:
        """Turn one asset and its candle history into a signal."""
        ...

    def fallback(self, asset: AssetSnapshot, reason: str) -> TradeSignal:
        """Build the degraded signal emitted when evaluation is impossible."""
        ...
