"""Pydantic schemas for Trade API."""

from datetime import date, datetime, time
from types import SimpleNamespace

from pydantic import BaseModel, Field, field_validator, model_validator

from journal.services.trade_math import derived_fields
from journal.utils.constants import ORDER_TYPES


def _validate_order_type(value: str | None) -> str | None:
    if value is None:
        return None
    order_type = value.upper()
    if order_type not in ORDER_TYPES:
        raise ValueError(f"must be one of: {', '.join(ORDER_TYPES)}")
    return order_type


class TradeCreate(BaseModel):
    coin_id: int
    strategy_id: int | None = None
    trade_date: date
    trade_time: time
    avg_entry: float = Field(gt=0)
    stop_loss: float = Field(gt=0)
    quantity: float = Field(gt=0)
    entry_order_type: str = "MARKET"
    entry_fee_percentage: float = Field(default=0.0, ge=0, le=100)
    notes: str | None = Field(default=None, max_length=5000)

    @field_validator("entry_order_type")
    @classmethod
    def _check_order_type(cls, value: str) -> str:
        return _validate_order_type(value)


class TradeUpdate(BaseModel):
    """Entry-side edits; only allowed while the trade is OPEN."""

    coin_id: int | None = None
    strategy_id: int | None = None
    trade_date: date | None = None
    trade_time: time | None = None
    avg_entry: float | None = Field(default=None, gt=0)
    stop_loss: float | None = Field(default=None, gt=0)
    quantity: float | None = Field(default=None, gt=0)
    entry_order_type: str | None = None
    entry_fee_percentage: float | None = Field(default=None, ge=0, le=100)
    notes: str | None = Field(default=None, max_length=5000)

    @field_validator("entry_order_type")
    @classmethod
    def _check_optional_order_type(cls, value: str | None) -> str | None:
        return _validate_order_type(value)


class TradeExit(BaseModel):
    exit_date: date
    exit_time: time
    avg_exit: float = Field(gt=0)
    exit_fee_percentage: float = Field(default=0.0, ge=0, le=100)
    notes: str | None = Field(default=None, max_length=5000)


class PreviewExitRequest(BaseModel):
    avg_exit: float = Field(gt=0)
    exit_fee_percentage: float = Field(default=0.0, ge=0, le=100)


class PreviewExitResponse(BaseModel):
    profit_loss: float
    profit_loss_percentage: float
    direction: str
    commission: float
    gross_profit_loss: float


class TradeRead(BaseModel):
    id: int
    organization_id: int
    coin_id: int
    strategy_id: int | None
    status: str
    trade_date: date
    trade_time: time
    avg_entry: float
    stop_loss: float
    quantity: float
    entry_order_type: str
    entry_fee_percentage: float
    exit_date: date | None
    exit_time: time | None
    avg_exit: float | None
    exit_fee_percentage: float | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    # Derived
    direction: str
    trade_value: float
    stop_loss_percentage: float
    commission: float
    gross_profit_loss: float | None
    profit_loss: float | None
    profit_loss_percentage: float | None
    duration: float | None  # hours

    @model_validator(mode="before")
    @classmethod
    def _add_derived(cls, data):
        # Derived columns are computed from the stored ones, never persisted.
        if isinstance(data, dict):
            if "direction" not in data and "avg_entry" in data:
                return {**data, **derived_fields(SimpleNamespace(**data))}
            return data
        if hasattr(data, "avg_entry"):
            return {**data.model_dump(), **derived_fields(data)}
        return data
