"""Coin master data."""

from datetime import datetime, timezone
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Coin(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("organization_id", "symbol", name="uq_coin_org_symbol"),)

    id: int | None = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organization.id", index=True)
    symbol: str = Field(index=True)  # e.g. "BTC"
    name: str
    image: str | None = None
    created_by: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
