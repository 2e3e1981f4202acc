"""Binance REST API client for fetching candle history."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from core.models import Candle

logger = logging.getLogger(__name__)

QUOTE_ASSET = "USDT"


class RateLimiter:
    """Simple rate limiter for API calls."""

    def __init__(self, calls_per_minute: int = 1200):
        self.calls_per_minute = calls_per_minute
        self.interval = 60.0 / calls_per_minute
        self.last_call = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait if necessary to respect rate limit."""
        async with self._lock:
            loop = asyncio.get_running_loop()
            wait_time = self.last_call + self.interval - loop.time()
            if wait_time > 0:
                await asyncio.sleep(wait_time)
            self.last_call = loop.time()


def normalize_symbol(symbol: str) -> str:
    """Map a universe symbol to its Binance USDT pair (e.g. 'btc' -> 'BTCUSDT')."""
    base = symbol.strip().upper().replace(QUOTE_ASSET, "", 1)
    return f"{base}{QUOTE_ASSET}"


def parse_kline_row(item: Any) -> Candle:
    """Convert one raw kline array into a Candle.

    Raises:
        ValueError, TypeError, IndexError, KeyError, OverflowError, OSError
        or ValidationError for malformed rows
    """
    return Candle(
        time=datetime.fromtimestamp(int(item[0]) / 1000, tz=timezone.utc),
        open=item[1],
        high=item[2],
        low=item[3],
        close=item[4],
        volume=item[5],
    )


class BinanceRestClient:
    """Binance spot REST API client."""

    BASE_URL = "https://api.binance.com"
    MAX_LIMIT = 1000

    def __init__(
        self,
        base_url: str | None = None,
        calls_per_minute: int = 1200,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.rate_limiter = RateLimiter(calls_per_minute)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, endpoint: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Make an API request with rate limiting."""
        await self.rate_limiter.acquire()
        client = await self._get_client()
        response = await client.request(method, endpoint, params=params)
        response.raise_for_status()
        return response.json()

    async def get_klines(
        self,
        symbol: str,
        interval: str,
        limit: int = 250,
    ) -> list[Candle]:
        """
        Fetch the latest candles from Binance.

        Args:
            symbol: Universe symbol or trading pair (e.g., "btc", "BTCUSDT")
            interval: Candle interval (e.g., "1h")
            limit: Maximum number of candles (max 1000)

        Returns:
            List of Candle objects, oldest first. Malformed rows are dropped.

        Raises:
            httpx.HTTPError on transport failure or non-success status
        """
        params: dict[str, Any] = {
            "symbol": normalize_symbol(symbol),
            "interval": interval,
            "limit": min(limit, self.MAX_LIMIT),
        }

        data = await self._request("GET", "/api/v3/klines", params)
        if not isinstance(data, list):
            logger.warning(f"Unexpected klines payload for {params['symbol']}")
            return []

        candles = []
        for item in data:
            try:
                candles.append(parse_kline_row(item))
            except (
                ValueError, TypeError, IndexError, KeyError,
                OverflowError, OSError, ValidationError,
            ):
                logger.debug(f"Dropping malformed kline for {params['symbol']}: {item!r}")

        candles.sort(key=lambda c: c.time)
        return candles

    async def fetch_candles(
        self,
        symbol: str,
        interval: str,
        limit: int,
    ) -> list[Candle]:
        """CandleProvider entry point: like get_klines, but never raises."""
        try:
            return await self.get_klines(symbol, interval, limit)
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Klines request for {symbol} failed: HTTP {e.response.status_code}"
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Klines request for {symbol} failed: {e}")
        return []
