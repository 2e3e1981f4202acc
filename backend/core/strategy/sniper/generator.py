"""Sniper protocol strategy implementation.

Trend-following readiness scan on hourly candles:
- Score: weighted sum of six gates (EMA200, EMA50, ADX>15, ADX>25,
  volume spike, RSI band), clamped to [5, 100]
- Decision: PASSED only when price > EMA200, ADX > 15, volume spike and
  RSI < 65 all hold

The decision uses a narrower RSI test than the score, so a high-scoring
asset can still be reported as failed.

Stop loss and take profit are fixed multiples of the entry price.

This module is pure business logic with no I/O dependencies.
"""

import logging
import math
from typing import Sequence

from core.indicators import IndicatorCalculator, IndicatorSnapshot
from core.models import (
    AssetSnapshot,
    Candle,
    SignalStatus,
    SniperConfig,
    TradeSignal,
)
from core.strategy.sniper.models import (
    REASON_ADX_LOW,
    REASON_BELOW_EMA200,
    REASON_LOCKED,
    REASON_LOW_VOLUME,
    REASON_RSI_ADJUSTING,
    REASON_SYNCHRONIZING,
    SNIPER_STRATEGY_NAME,
)

logger = logging.getLogger(__name__)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


class SniperStrategy:
    """Sniper protocol evaluator.

    Gates:
    - above_ema200: price > EMA200
    - above_ema50: price > EMA50
    - strong_trend: ADX > 15 (bonus when ADX > 25)
    - volume_spike: last volume >= 1.2 * SMA20(volume)
    - rsi_band: 35 < RSI < 65
    """

    def __init__(self, config: SniperConfig | None = None):
        self.config = config or SniperConfig()
        self.calculator = IndicatorCalculator(self.config)

    @property
    def name(self) -> str:
        return SNIPER_STRATEGY_NAME

    @property
    def version(self) -> str:
        return "1.0.0"

    # ------------------------------------------------------------------
    # Core logic
    # ------------------------------------------------------------------

    def evaluate(
        self,
        asset: AssetSnapshot,
        candles: Sequence[Candle],
    ) -> TradeSignal:
        """Evaluate one asset against the sniper protocol.

        Args:
            asset: Universe snapshot (supplies the entry price)
            candles: Candle history in ascending time order

        Returns:
            TradeSignal; a "synchronizing" fallback when history is too short
        """
        if len(candles) < self.config.min_candles:
            logger.debug(
                f"{asset.symbol}: only {len(candles)} candles, synchronizing"
            )
            return self.fallback(asset, REASON_SYNCHRONIZING)

        indicators = self.calculator.calculate_latest(candles)
        price = asset.current_price
        cfg = self.config

        above_ema_slow = price > indicators.ema_slow
        above_ema_fast = price > indicators.ema_fast
        strong_trend = indicators.adx > cfg.adx_trend_threshold
        volume_spike = (
            indicators.current_volume >= indicators.avg_volume * cfg.volume_spike_mult
        )
        rsi_band = cfg.rsi_lower < indicators.rsi < cfg.rsi_upper

        score = self.score(indicators, price)

        if (
            above_ema_slow
            and strong_trend
            and volume_spike
            and indicators.rsi < cfg.rsi_upper
        ):
            status = SignalStatus.PASSED
            reason = REASON_LOCKED
        else:
            status = SignalStatus.FAILED
            if not above_ema_slow:
                reason = REASON_BELOW_EMA200
            elif not strong_trend:
                reason = REASON_ADX_LOW
            elif not volume_spike:
                reason = REASON_LOW_VOLUME
            else:
                reason = REASON_RSI_ADJUSTING

        logger.debug(
            f"{asset.symbol}: score={score:.0f} status={status.value} "
            f"ema200={above_ema_slow} ema50={above_ema_fast} "
            f"trend={strong_trend} volume={volume_spike} rsi_band={rsi_band}"
        )

        return self._build_signal(
            asset,
            indicators=indicators,
            score=score,
            status=status,
            reason=reason,
        )

    def score(self, indicators: IndicatorSnapshot, price: float) -> float:
        """Weighted readiness score, clamped to [score_min, score_max]."""
        cfg = self.config
        score = 0
        if price > indicators.ema_slow:
            score += cfg.weight_above_ema_slow
        if price > indicators.ema_fast:
            score += cfg.weight_above_ema_fast
        if indicators.adx > cfg.adx_trend_threshold:
            score += cfg.weight_trend
        if indicators.adx > cfg.adx_strong_threshold:
            score += cfg.weight_strong_trend
        if indicators.current_volume >= indicators.avg_volume * cfg.volume_spike_mult:
            score += cfg.weight_volume_spike
        if cfg.rsi_lower < indicators.rsi < cfg.rsi_upper:
            score += cfg.weight_rsi_band
        return _clamp(score, cfg.score_min, cfg.score_max)

    def fallback(self, asset: AssetSnapshot, reason: str) -> TradeSignal:
        """Build a neutral, failed signal scored on the 24h move alone."""
        cfg = self.config
        change = asset.price_change_percent_24h
        if math.isnan(change):
            score = cfg.score_min
        else:
            score = _clamp(abs(change) * 2, cfg.score_min, cfg.default_score_max)

        return self._build_signal(
            asset,
            indicators=None,
            score=score,
            status=SignalStatus.FAILED,
            reason=reason,
        )

    def _build_signal(
        self,
        asset: AssetSnapshot,
        indicators: IndicatorSnapshot | None,
        score: float,
        status: SignalStatus,
        reason: str,
    ) -> TradeSignal:
        price = asset.current_price
        return TradeSignal(
            symbol=asset.symbol.upper(),
            name=asset.name,
            image_ref=asset.image_ref,
            entry_price=price,
            price_change_percent=asset.price_change_percent_24h,
            volume=asset.total_volume,
            rsi=indicators.rsi if indicators else 50.0,
            ema200=indicators.ema_slow if indicators else 0.0,
            ema50=indicators.ema_fast if indicators else 0.0,
            adx=indicators.adx if indicators else 0.0,
            avg_volume20=indicators.avg_volume if indicators else 0.0,
            score=score,
            status=status,
            reason=reason,
            stop_loss=price * self.config.stop_loss_mult,
            take_profit=price * self.config.take_profit_mult,
        )
