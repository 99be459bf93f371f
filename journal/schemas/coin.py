"""Pydantic schemas for Coin API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


def _clean_symbol(value: str) -> str:
    symbol = value.strip().upper()
    if not symbol:
        raise ValueError("must not be empty")
    if not symbol.isalnum():
        raise ValueError("must be alphanumeric")
    return symbol


class CoinCreate(BaseModel):
    symbol: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=120)
    image: str | None = Field(default=None, max_length=500)

    @field_validator("symbol")
    @classmethod
    def _validate_symbol(cls, value: str) -> str:
        return _clean_symbol(value)

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class CoinUpdate(BaseModel):
    symbol: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=120)
    image: str | None = Field(default=None, max_length=500)

    @field_validator("symbol")
    @classmethod
    def _validate_optional_symbol(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _clean_symbol(value)

    @field_validator("name")
    @classmethod
    def _trim_optional_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class CoinRead(BaseModel):
    id: int
    symbol: str
    name: str
    image: str | None
    organization_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
