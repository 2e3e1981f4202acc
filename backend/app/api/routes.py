"""REST API routes."""

import logging
import math
from typing import Optional

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from app.services import MarketScanner
from core.models import TradeSignal

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "0.1.0"


# Response models
class SignalResponse(BaseModel):
    """Signal response model."""

    symbol: str
    name: str
    image: str
    entry_price: float
    price_change_percent: Optional[float] = None
    volume: str
    rsi: float
    ema200: float
    adx: float
    analysis: str
    score: float
    status: str
    reason: str
    stop_loss: float
    take_profit: float

    @classmethod
    def from_signal(cls, signal: TradeSignal) -> "SignalResponse":
        change = signal.price_change_percent
        return cls(
            symbol=signal.symbol,
            name=signal.name,
            image=signal.image_ref,
            entry_price=signal.entry_price,
            price_change_percent=None if math.isnan(change) else change,
            volume=signal.volume_label,
            rsi=signal.rsi,
            ema200=signal.ema200,
            adx=signal.adx,
            analysis=signal.analysis,
            score=signal.score,
            status=signal.status.value,
            reason=signal.reason,
            stop_loss=signal.stop_loss,
            take_profit=signal.take_profit,
        )


class ScanResponse(BaseModel):
    """Scan response model."""

    count: int
    passed: int
    signals: list[SignalResponse]


class SystemStatus(BaseModel):
    """System status response."""

    status: str
    version: str
    strategy: str
    universe_limit: int
    candle_interval: str
    max_concurrency: int


def get_scanner(request: Request) -> MarketScanner:
    return request.app.state.scanner


@router.get("/scan", response_model=ScanResponse)
async def run_scan(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=250),
):
    """Run a fresh market scan and return signals ranked by score."""
    scanner = get_scanner(request)
    signals = await scanner.scan(limit)
    return ScanResponse(
        count=len(signals),
        passed=sum(1 for s in signals if s.is_passed),
        signals=[SignalResponse.from_signal(s) for s in signals],
    )


@router.get("/status", response_model=SystemStatus)
async def get_status(request: Request):
    """Get system status."""
    scanner = get_scanner(request)
    return SystemStatus(
        status="running",
        version=API_VERSION,
        strategy=scanner.strategy.name,
        universe_limit=scanner.universe_limit,
        candle_interval=scanner.candle_interval,
        max_concurrency=scanner.max_concurrency,
    )
