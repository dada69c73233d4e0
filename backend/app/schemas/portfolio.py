# backend/app/schemas/portfolio.py
from typing import Optional

from pydantic import Field, field_validator

from backend.app.schemas.base import CamelModel


class HoldingCreate(CamelModel):
    symbol: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    average_price: float = Field(ge=0)
    current_price: Optional[float] = Field(default=None, ge=0)

    @field_validator("symbol")
    @classmethod
    def upper_symbol(cls, value: str) -> str:
        return value.strip().upper()


class HoldingOut(CamelModel):
    id: str
    symbol: str
    quantity: float
    average_price: float
    current_price: Optional[float] = None
