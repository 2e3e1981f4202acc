"""Market data provider protocols.

Any transport (live REST client, recorded fixtures, in-memory fakes) can
implement these protocols to feed the scanner. Implementations must absorb
their own transport failures and return an empty list instead of raising.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.models.asset import AssetSnapshot
from core.models.candle import Candle


@runtime_checkable
class UniverseProvider(Protocol):
    """Protocol for sources of the ranked asset universe."""

    async def fetch_universe(self, limit: int) -> list[AssetSnapshot]:
        """Get up to ``limit`` assets ordered by rank."""
        ...


@runtime_checkable
class CandleProvider(Protocol):
    """Protocol for sources of historical candles."""

    async def fetch_candles(
        self,
        symbol: str,
        interval: str,
        limit: int,
    ) -> list[Candle]:
        """Get the latest ``limit`` candles for a symbol, oldest first."""
        ...
