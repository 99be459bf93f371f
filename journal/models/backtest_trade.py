"""BacktestTrade model — a standalone entry/stop/exit record for strategy testing."""

from datetime import date, datetime, time, timezone
from sqlmodel import SQLModel, Field


class BacktestTrade(SQLModel, table=True):
    __tablename__ = "backtest_trade"

    id: int | None = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organization.id", index=True)
    coin_id: int = Field(foreign_key="coin.id", index=True)
    strategy_id: int = Field(foreign_key="strategy.id", index=True)
    trade_date: date
    trade_time: time
    entry: float
    stop_loss: float
    exit: float
    notes: str | None = None
    created_by: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
