"""CoinGecko REST API client for the ranked market universe."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from core.models import AssetSnapshot

logger = logging.getLogger(__name__)


def parse_market_entry(item: dict[str, Any]) -> AssetSnapshot:
    """Convert one /coins/markets entry into an AssetSnapshot.

    Raises:
        ValidationError if required fields are missing or malformed
    """
    return AssetSnapshot(
        symbol=item.get("symbol") or "",
        name=item.get("name") or "",
        image_ref=item.get("image"),
        current_price=item.get("current_price"),
        price_change_percent_24h=item.get("price_change_percentage_24h"),
        total_volume=item.get("total_volume"),
        rank=item.get("market_cap_rank"),
    )


class CoinGeckoRestClient:
    """CoinGecko public API client."""

    BASE_URL = "https://api.coingecko.com"
    MAX_PER_PAGE = 250

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or self.BASE_URL
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self.api_key:
                headers["x-cg-demo-api-key"] = self.api_key
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_markets(self, limit: int = 50) -> list[AssetSnapshot]:
        """
        Fetch the top assets by market cap.

        Args:
            limit: Number of assets (max 250)

        Returns:
            List of AssetSnapshot objects in rank order. Malformed entries are dropped.

        Raises:
            httpx.HTTPError on transport failure or non-success status
        """
        params = {
            "vs_currency": "usd",
            "order": "market_cap_desc",
            "per_page": min(limit, self.MAX_PER_PAGE),
            "page": 1,
            "sparkline": "false",
        }
        client = await self._get_client()
        response = await client.get("/api/v3/coins/markets", params=params)
        response.raise_for_status()
        data = response.json()

        if not isinstance(data, list):
            logger.warning("Unexpected markets payload from CoinGecko")
            return []

        assets = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                assets.append(parse_market_entry(item))
            except ValidationError:
                logger.debug(f"Dropping malformed market entry: {item.get('id')!r}")
        return assets

    async def fetch_universe(self, limit: int) -> list[AssetSnapshot]:
        """UniverseProvider entry point: like get_markets, but never raises."""
        try:
            return await self.get_markets(limit)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                logger.warning("CoinGecko rate limit reached, returning empty universe")
            else:
                logger.warning(f"Markets request failed: HTTP {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Markets request failed: {e}")
        return []
