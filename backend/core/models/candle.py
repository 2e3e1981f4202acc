"""Candle (OHLCV) data model."""

from datetime import datetime
from pydantic import BaseModel, ConfigDict


class Candle(BaseModel):
    """One OHLCV candle, identified by its open time."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float
