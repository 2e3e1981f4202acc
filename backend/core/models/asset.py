"""Market universe snapshot model."""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AssetSnapshot(BaseModel):
    """Point-in-time listing of one asset from the market universe."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    image_ref: str = ""
    current_price: float = Field(allow_inf_nan=False)
    price_change_percent_24h: float = math.nan  # Missing for some new listings
    total_volume: float = 0.0
    rank: int | None = None

    @field_validator("symbol", "name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("price_change_percent_24h", mode="before")
    @classmethod
    def _missing_change_is_nan(cls, value):
        return math.nan if value is None else value

    @field_validator("total_volume", mode="before")
    @classmethod
    def _missing_volume_is_zero(cls, value):
        return 0.0 if value is None else value

    @field_validator("image_ref", mode="before")
    @classmethod
    def _missing_image_is_empty(cls, value):
        return "" if value is None else value
