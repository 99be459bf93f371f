"""Pydantic schemas for the position-size calculator."""

from pydantic import BaseModel, Field


class PositionSizeRequest(BaseModel):
    entry: float = Field(gt=0)
    stop_loss: float = Field(gt=0)
    account_balance: float = Field(ge=0)
    risk_percentage: float = Field(default=1.8, ge=0, le=100)


class PositionSizeResponse(BaseModel):
    direction: str
    risk_amount: float
    trade_value: float
    quantity: float
    leverage: float
