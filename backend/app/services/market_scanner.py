"""Market scan service.

Runs the sniper strategy across the market universe:
- Fetch the ranked universe and drop stablecoins / wrapped assets
- Fetch candles and evaluate every remaining asset concurrently
  (bounded by a semaphore, each asset bounded by a timeout)
- Fold failures into degraded signals and rank by score

A scan never raises and holds no state between calls.
"""

import asyncio
import logging
import time

from app.clients import BinanceRestClient, CoinGeckoRestClient
from app.config import Settings
from app.scanner_profile import ScannerProfile
from core.models import AssetSnapshot, TradeSignal, UniverseFilterConfig
from core.providers import CandleProvider, UniverseProvider
from core.strategy import AssetOutcome, SignalEvaluator, SniperStrategy
from core.strategy.sniper import REASON_CONNECTION_ERROR

logger = logging.getLogger(__name__)


class MarketScanner:
    """Fan-out scanner producing a ranked list of trade signals."""

    def __init__(
        self,
        universe_provider: UniverseProvider,
        candle_provider: CandleProvider,
        strategy: SignalEvaluator | None = None,
        universe_filter: UniverseFilterConfig | None = None,
        universe_limit: int = 50,
        candle_interval: str = "1h",
        candle_limit: int = 210,
        max_concurrency: int = 10,
        asset_timeout: float | None = 15.0,
    ):
        self.universe_provider = universe_provider
        self.candle_provider = candle_provider
        self.strategy = strategy or SniperStrategy()
        self.universe_filter = universe_filter or UniverseFilterConfig()
        self.universe_limit = universe_limit
        self.candle_interval = candle_interval
        self.candle_limit = candle_limit
        self.max_concurrency = max(1, max_concurrency)
        self.asset_timeout = asset_timeout

    async def close(self) -> None:
        """Close providers that hold network resources."""
        for provider in (self.universe_provider, self.candle_provider):
            close = getattr(provider, "close", None)
            if close is not None:
                await close()

    def filter_universe(self, assets: list[AssetSnapshot]) -> list[AssetSnapshot]:
        """Drop denylisted assets and duplicate symbols (first listing wins)."""
        seen: set[str] = set()
        result = []
        for asset in assets:
            key = asset.symbol.upper()
            if key in seen or self.universe_filter.is_excluded(asset):
                continue
            seen.add(key)
            result.append(asset)
        return result

    async def _scan_asset(
        self, asset: AssetSnapshot, semaphore: asyncio.Semaphore
    ) -> AssetOutcome:
        """Fetch and evaluate one asset; failures are returned, not raised."""
        async with semaphore:
            try:
                candles = await asyncio.wait_for(
                    self.candle_provider.fetch_candles(
                        asset.symbol, self.candle_interval, self.candle_limit
                    ),
                    timeout=self.asset_timeout,
                )
                signal = self.strategy.evaluate(asset, candles)
                return AssetOutcome(asset=asset, signal=signal)
            except asyncio.TimeoutError:
                logger.warning(
                    f"{asset.symbol}: candle fetch timed out after {self.asset_timeout}s"
                )
                return AssetOutcome(asset=asset, error="timeout")
            except Exception as e:
                logger.warning(f"{asset.symbol}: evaluation failed: {e}")
                logger.debug("Evaluation traceback", exc_info=True)
                return AssetOutcome(asset=asset, error=str(e) or type(e).__name__)

    def _to_signal(self, outcome: AssetOutcome) -> TradeSignal:
        if outcome.signal is not None:
            return outcome.signal
        return self.strategy.fallback(outcome.asset, REASON_CONNECTION_ERROR)

    async def scan(self, universe_limit: int | None = None) -> list[TradeSignal]:
        """
        Run one full scan.

        Args:
            universe_limit: Number of ranked assets to fetch (defaults to the
                scanner's configured limit)

        Returns:
            One signal per scanned asset, sorted by score descending.
            Empty if the universe could not be fetched.
        """
        limit = self.universe_limit if universe_limit is None else universe_limit
        started = time.perf_counter()

        try:
            assets = await self.universe_provider.fetch_universe(limit)
        except Exception as e:
            logger.error(f"Universe fetch failed: {e}")
            return []

        if not assets:
            logger.warning("Universe is empty, nothing to scan")
            return []

        candidates = self.filter_universe(assets)
        semaphore = asyncio.Semaphore(self.max_concurrency)
        outcomes = await asyncio.gather(
            *(self._scan_asset(asset, semaphore) for asset in candidates)
        )

        signals = sorted(
            (self._to_signal(o) for o in outcomes),
            key=lambda s: s.score,
            reverse=True,
        )

        passed = sum(1 for s in signals if s.is_passed)
        failures = [o for o in outcomes if not o.ok]
        logger.info(
            f"Scan complete: {len(signals)}/{len(assets)} assets scanned, "
            f"{passed} passed, {len(failures)} degraded "
            f"({time.perf_counter() - started:.2f}s)"
        )
        if failures:
            logger.warning(
                "Degraded assets: "
                + ", ".join(f"{o.asset.symbol.upper()} ({o.error})" for o in failures)
            )
        return signals


def build_market_scanner(
    settings: Settings,
    profile: ScannerProfile | None = None,
) -> MarketScanner:
    """Create a scanner wired to the live CoinGecko and Binance clients."""
    profile = profile or ScannerProfile()
    return MarketScanner(
        universe_provider=CoinGeckoRestClient(
            base_url=settings.coingecko_base_url,
            api_key=settings.coingecko_api_key,
            timeout=settings.http_timeout,
        ),
        candle_provider=BinanceRestClient(
            base_url=settings.binance_base_url,
            calls_per_minute=settings.binance_calls_per_minute,
            timeout=settings.http_timeout,
        ),
        strategy=SniperStrategy(profile.sniper),
        universe_filter=profile.universe_filter,
        universe_limit=settings.universe_limit,
        candle_interval=settings.candle_interval,
        candle_limit=settings.candle_limit,
        max_concurrency=settings.max_concurrency,
        asset_timeout=settings.asset_timeout,
    )
