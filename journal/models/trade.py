"""Trade model — a journaled position, OPEN until its exit is recorded.

Profit/loss, fees and duration are derived from the stored prices and
timestamps (see journal.services.trade_math); they are never persisted.
"""

from datetime import date, datetime, time, timezone
from sqlmodel import SQLModel, Field


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: int | None = Field(default=None, primary_key=True)
    organization_id: int = Field(foreign_key="organization.id", index=True)
    coin_id: int = Field(foreign_key="coin.id", index=True)
    strategy_id: int | None = Field(default=None, foreign_key="strategy.id", index=True)
    status: str = Field(default="OPEN", index=True)  # "OPEN" | "CLOSED"

    # Entry (immutable once closed)
    trade_date: date
    trade_time: time
    avg_entry: float
    stop_loss: float
    quantity: float
    entry_order_type: str = "MARKET"  # "MARKET" | "LIMIT"
    entry_fee_percentage: float = 0.0

    # Exit (set exactly once, on close)
    exit_date: date | None = None
    exit_time: time | None = None
    avg_exit: float | None = None
    exit_fee_percentage: float | None = None

    notes: str | None = None
    created_by: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
