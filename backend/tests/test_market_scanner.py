"""Tests for the market scan service."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from app.clients import BinanceRestClient, CoinGeckoRestClient
from app.config import Settings
from app.scanner_profile import ScannerProfile
from app.services import MarketScanner, build_market_scanner
from core.models import AssetSnapshot, Candle, SignalStatus, SniperConfig, UniverseFilterConfig
from core.providers import CandleProvider, UniverseProvider
from core.strategy.sniper import (
    REASON_CONNECTION_ERROR,
    REASON_LOCKED,
    REASON_SYNCHRONIZING,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _asset(symbol: str, name: str | None = None, price: float = 150.0, change: float = 2.0):
    return AssetSnapshot(
        symbol=symbol,
        name=name or f"{symbol.upper()} Token",
        current_price=price,
        price_change_percent_24h=change,
        total_volume=1_000_000.0,
    )


def _uptrend_candles(n: int = 210) -> list[Candle]:
    """Sawtooth uptrend 100 -> 150 with a volume spike on the last candle."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    step = 50.0 / (n - 1)
    offsets = [0.0, 1.0, -1.0]
    candles = []
    for i in range(n):
        trend = 100.0 + step * i
        close = trend + offsets[i % 3]
        candles.append(
            Candle(
                time=base + timedelta(hours=i),
                open=close,
                high=trend + 3.0,
                low=trend - 3.0,
                close=close,
                volume=2000.0 if i == n - 1 else 1000.0,
            )
        )
    return candles


class FakeUniverse:
    """In-memory UniverseProvider."""

    def __init__(self, assets: list[AssetSnapshot]):
        self.assets = assets
        self.calls: list[int] = []

    async def fetch_universe(self, limit: int) -> list[AssetSnapshot]:
        self.calls.append(limit)
        return self.assets[:limit]


class FakeCandles:
    """In-memory CandleProvider with per-symbol behaviour."""

    def __init__(
        self,
        series: dict[str, list[Candle]] | None = None,
        errors: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ):
        self.series = series or {}
        self.errors = errors or set()
        self.delays = delays or {}
        self.requested: list[tuple[str, str, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_candles(self, symbol: str, interval: str, limit: int) -> list[Candle]:
        self.requested.append((symbol, interval, limit))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(symbol, 0.01))
            if symbol in self.errors:
                raise RuntimeError(f"socket closed for {symbol}")
            return self.series.get(symbol, [])
        finally:
            self.in_flight -= 1


# ---------------------------------------------------------------------------
# Universe filtering
# ---------------------------------------------------------------------------

class TestFilterUniverse:
    def test_fakes_satisfy_protocols(self):
        assert isinstance(FakeUniverse([]), UniverseProvider)
        assert isinstance(FakeCandles(), CandleProvider)

    def test_excludes_denylisted_symbols(self):
        scanner = MarketScanner(FakeUniverse([]), FakeCandles())
        assets = [_asset("btc"), _asset("USDT", name="Tether"), _asset("wbtc"), _asset("TON")]

        kept = scanner.filter_universe(assets)

        assert [a.symbol for a in kept] == ["btc"]

    @pytest.mark.parametrize(
        "name",
        ["First Digital USD", "Tether Gold", "Wrapped eETH", "USDe", "Ethena staked usde"],
    )
    def test_excludes_name_terms(self, name):
        scanner = MarketScanner(FakeUniverse([]), FakeCandles())
        assert scanner.filter_universe([_asset("xyz", name=name)]) == []

    def test_drops_duplicate_symbols(self):
        scanner = MarketScanner(FakeUniverse([]), FakeCandles())
        first = _asset("eth", name="Ethereum")
        dup = _asset("ETH", name="Ethereum Classic Bridge")

        kept = scanner.filter_universe([first, dup])

        assert kept == [first]

    def test_custom_filter(self):
        scanner = MarketScanner(
            FakeUniverse([]),
            FakeCandles(),
            universe_filter=UniverseFilterConfig(excluded_symbols=["doge"], excluded_name_terms=[]),
        )
        kept = scanner.filter_universe([_asset("doge"), _asset("usdt", name="Tether")])
        assert [a.symbol for a in kept] == ["usdt"]


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------

class TestScan:
    @pytest.mark.asyncio
    async def test_scan_ranks_by_score(self):
        assets = [_asset("aaa", change=1.0), _asset("bbb", change=9.0), _asset("ccc")]
        candles = FakeCandles(series={"ccc": _uptrend_candles()})
        scanner = MarketScanner(FakeUniverse(assets), candles)

        signals = await scanner.scan()

        assert [s.symbol for s in signals] == ["CCC", "BBB", "AAA"]
        assert signals[0].status == SignalStatus.PASSED
        assert signals[0].reason == REASON_LOCKED
        assert signals[0].score == 100
        scores = [s.score for s in signals]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_excluded_assets_are_never_fetched(self):
        assets = [_asset("btc"), _asset("usdc", name="USDC"), _asset("steth", name="Lido Staked Ether")]
        candles = FakeCandles()
        scanner = MarketScanner(FakeUniverse(assets), candles)

        signals = await scanner.scan()

        assert [s.symbol for s in signals] == ["BTC"]
        assert [r[0] for r in candles.requested] == ["btc"]

    @pytest.mark.asyncio
    async def test_requests_hourly_candles(self):
        candles = FakeCandles()
        scanner = MarketScanner(FakeUniverse([_asset("btc")]), candles)

        await scanner.scan()

        assert candles.requested == [("btc", "1h", 210)]

    @pytest.mark.asyncio
    async def test_empty_candles_isolated_to_one_symbol(self):
        assets = [_asset("good"), _asset("new")]
        candles = FakeCandles(series={"good": _uptrend_candles()})
        scanner = MarketScanner(FakeUniverse(assets), candles)

        signals = {s.symbol: s for s in await scanner.scan()}

        assert signals["NEW"].reason == REASON_SYNCHRONIZING
        assert signals["NEW"].rsi == 50.0
        assert signals["GOOD"].status == SignalStatus.PASSED

    @pytest.mark.asyncio
    async def test_provider_error_becomes_connection_error(self):
        assets = [_asset("good"), _asset("bad", change=-6.0)]
        candles = FakeCandles(series={"good": _uptrend_candles()}, errors={"bad"})
        scanner = MarketScanner(FakeUniverse(assets), candles)

        signals = {s.symbol: s for s in await scanner.scan()}

        assert len(signals) == 2
        assert signals["BAD"].reason == REASON_CONNECTION_ERROR
        assert signals["BAD"].status == SignalStatus.FAILED
        assert signals["BAD"].score == 12.0
        assert signals["BAD"].stop_loss == signals["BAD"].entry_price * 0.98
        assert signals["GOOD"].status == SignalStatus.PASSED

    @pytest.mark.asyncio
    async def test_degraded_assets_logged_with_cause(self, caplog):
        assets = [_asset("good"), _asset("bad")]
        candles = FakeCandles(series={"good": _uptrend_candles()}, errors={"bad"})
        scanner = MarketScanner(FakeUniverse(assets), candles)

        with caplog.at_level(logging.INFO, logger="app.services.market_scanner"):
            await scanner.scan()

        assert "1 degraded" in caplog.text
        assert "BAD (socket closed for bad)" in caplog.text

    @pytest.mark.asyncio
    async def test_strategy_error_becomes_connection_error(self):
        scanner = MarketScanner(
            FakeUniverse([_asset("btc"), _asset("eth")]),
            FakeCandles(series={"btc": _uptrend_candles(), "eth": _uptrend_candles()}),
        )
        scanner.strategy.calculator.calculate_latest = lambda candles: 1 / 0

        signals = await scanner.scan()

        assert len(signals) == 2
        assert all(s.reason == REASON_CONNECTION_ERROR for s in signals)

    @pytest.mark.asyncio
    async def test_slow_asset_times_out(self):
        assets = [_asset("fast"), _asset("slow")]
        candles = FakeCandles(
            series={"fast": _uptrend_candles(), "slow": _uptrend_candles()},
            delays={"slow": 5.0},
        )
        scanner = MarketScanner(FakeUniverse(assets), candles, asset_timeout=0.1)

        signals = {s.symbol: s for s in await scanner.scan()}

        assert signals["SLOW"].reason == REASON_CONNECTION_ERROR
        assert signals["FAST"].status == SignalStatus.PASSED

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        assets = [_asset(f"c{i}") for i in range(12)]
        candles = FakeCandles(delays={f"c{i}": 0.02 for i in range(12)})
        scanner = MarketScanner(FakeUniverse(assets), candles, max_concurrency=3)

        signals = await scanner.scan()

        assert len(signals) == 12
        assert 1 < candles.max_in_flight <= 3

    @pytest.mark.asyncio
    async def test_empty_universe_returns_empty(self):
        candles = FakeCandles()
        scanner = MarketScanner(FakeUniverse([]), candles)

        assert await scanner.scan() == []
        assert candles.requested == []

    @pytest.mark.asyncio
    async def test_universe_failure_returns_empty(self):
        universe = AsyncMock()
        universe.fetch_universe = AsyncMock(side_effect=ConnectionError("down"))
        scanner = MarketScanner(universe, FakeCandles())

        assert await scanner.scan() == []

    @pytest.mark.asyncio
    async def test_universe_limit(self):
        universe = FakeUniverse([_asset(f"c{i}") for i in range(10)])
        scanner = MarketScanner(universe, FakeCandles(), universe_limit=7)

        default_run = await scanner.scan()
        explicit_run = await scanner.scan(3)

        assert universe.calls == [7, 3]
        assert len(default_run) == 7
        assert len(explicit_run) == 3

    @pytest.mark.asyncio
    async def test_explicit_zero_limit_is_not_replaced_by_default(self):
        universe = FakeUniverse([_asset(f"c{i}") for i in range(10)])
        candles = FakeCandles()
        scanner = MarketScanner(universe, candles, universe_limit=7)

        assert await scanner.scan(0) == []
        assert universe.calls == [0]
        assert candles.requested == []

    @pytest.mark.asyncio
    async def test_each_scan_builds_fresh_signals(self):
        universe = FakeUniverse([_asset("btc")])
        candles = FakeCandles(series={"btc": _uptrend_candles()})
        scanner = MarketScanner(universe, candles)

        first = await scanner.scan()
        candles.series = {}
        second = await scanner.scan()

        assert first[0].status == SignalStatus.PASSED
        assert second[0].reason == REASON_SYNCHRONIZING
        assert first is not second


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

class TestBuildMarketScanner:
    @pytest.mark.asyncio
    async def test_wires_live_clients_from_settings(self):
        settings = Settings(
            universe_limit=25,
            candle_limit=300,
            max_concurrency=4,
            asset_timeout=7.5,
            _env_file=None,
        )
        profile = ScannerProfile(sniper=SniperConfig(adx_trend_threshold=20.0))

        scanner = build_market_scanner(settings, profile)
        try:
            assert isinstance(scanner.universe_provider, CoinGeckoRestClient)
            assert isinstance(scanner.candle_provider, BinanceRestClient)
            assert scanner.universe_limit == 25
            assert scanner.candle_limit == 300
            assert scanner.max_concurrency == 4
            assert scanner.asset_timeout == 7.5
            assert scanner.strategy.config.adx_trend_threshold == 20.0
        finally:
            await scanner.close()
