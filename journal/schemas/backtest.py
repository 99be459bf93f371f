"""Pydantic schemas for BacktestTrade API."""

from datetime import date, datetime, time

from pydantic import BaseModel, Field, model_validator

from journal.services.backtest import r_multiple
from journal.services.trade_math import direction


class BacktestTradeCreate(BaseModel):
    coin_id: int
    strategy_id: int
    trade_date: date
    trade_time: time
    entry: float = Field(gt=0)
    stop_loss: float = Field(gt=0)
    exit: float = Field(gt=0)
    notes: str | None = Field(default=None, max_length=5000)


class BacktestTradeUpdate(BaseModel):
    coin_id: int | None = None
    strategy_id: int | None = None
    trade_date: date | None = None
    trade_time: time | None = None
    entry: float | None = Field(default=None, gt=0)
    stop_loss: float | None = Field(default=None, gt=0)
    exit: float | None = Field(default=None, gt=0)
    notes: str | None = Field(default=None, max_length=5000)


class BacktestTradeRead(BaseModel):
    id: int
    organization_id: int
    coin_id: int
    strategy_id: int
    trade_date: date
    trade_time: time
    entry: float
    stop_loss: float
    exit: float
    notes: str | None
    created_at: datetime
    updated_at: datetime

    direction: str
    r_value: float

    @model_validator(mode="before")
    @classmethod
    def _add_derived(cls, data):
        if isinstance(data, dict):
            if "r_value" in data or "entry" not in data:
                return data
            fields = data
        elif hasattr(data, "entry"):
            fields = data.model_dump()
        else:
            return data
        return {
            **fields,
            "direction": direction(fields["entry"], fields["stop_loss"]),
            "r_value": r_multiple(fields["entry"], fields["stop_loss"], fields["exit"]),
        }
