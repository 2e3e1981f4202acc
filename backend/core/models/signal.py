"""Trade signal model."""

import math
from enum import Enum
from pydantic import BaseModel, ConfigDict


class SignalStatus(str, Enum):
    """Sniper protocol decision."""

    PASSED = "passed"
    FAILED = "failed"


class TradeSignal(BaseModel):
    """Result of evaluating one asset in one scan.

    Signals are rebuilt on every scan and never updated in place.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    image_ref: str = ""
    entry_price: float
    price_change_percent: float
    volume: float  # 24h total volume from the universe listing
    rsi: float
    ema200: float
    ema50: float = 0.0
    adx: float
    avg_volume20: float = 0.0
    score: float
    status: SignalStatus
    reason: str
    stop_loss: float
    take_profit: float

    @property
    def is_passed(self) -> bool:
        return self.status == SignalStatus.PASSED

    @property
    def volume_label(self) -> str:
        """Total volume in millions, e.g. '123.4M'."""
        if math.isnan(self.volume):
            return "0.0M"
        return f"{self.volume / 1_000_000:.1f}M"

    @property
    def analysis(self) -> str:
        """Short indicator summary for display."""
        if self.ema200 == 0 and self.adx == 0:
            return "Initializing..."
        return f"RSI: {self.rsi:.0f} | ADX: {self.adx:.0f}"
