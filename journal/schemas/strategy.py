"""Pydantic schemas for Strategy API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class StrategyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    rules: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class StrategyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    rules: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def _trim_optional_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class StrategyRead(BaseModel):
    id: int
    name: str
    description: str | None
    rules: dict[str, Any] | None
    organization_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
