"""Strategy master data."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import SQLModel, Field


class Strategy(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("organization_id", "name", name="uq_strategy_org_name"),)

    id: int | None = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organization.id", index=True)
    name: str = Field(index=True)
    description: str | None = None
    rules: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    created_by: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
