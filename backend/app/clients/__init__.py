"""Market data clients."""

from app.clients.binance_rest import BinanceRestClient, RateLimiter, normalize_symbol
from app.clients.coingecko_rest import CoinGeckoRestClient

__all__ = [
    "BinanceRestClient",
    "RateLimiter",
    "normalize_symbol",
    "CoinGeckoRestClient",
]
