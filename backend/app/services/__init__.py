"""Business services."""

from app.services.market_scanner import MarketScanner, build_market_scanner

__all__ = [
    "MarketScanner",
    "build_market_scanner",
]
