"""Pydantic schemas for analytics reports."""

from datetime import date

from pydantic import BaseModel, Field

from journal.utils.constants import DURATION_BUCKETS


def _empty_duration_buckets() -> dict[str, int]:
    return {label: 0 for _, label in DURATION_BUCKETS}


class CoinBreakdown(BaseModel):
    coin_id: int | None
    coin_symbol: str = ""
    coin_name: str = ""
    trades: int = 0
    win_rate: float = 0.0
    profit_loss: float = 0.0


class StrategyBreakdown(BaseModel):
    strategy_id: int | None
    strategy_name: str = ""
    trades: int = 0
    win_rate: float = 0.0
    profit_loss: float = 0.0


class TradeAnalytics(BaseModel):
    total_trades: int = 0
    open_trades: int = 0
    closed_trades: int = 0
    win_rate: float = 0.0
    total_profit_loss: float = 0.0
    total_fees_paid: float = 0.0
    average_profit_loss: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    by_coin: list[CoinBreakdown] = Field(default_factory=list)
    by_strategy: list[StrategyBreakdown] = Field(default_factory=list)
    by_duration: dict[str, int] = Field(default_factory=_empty_duration_buckets)


class DailyProfitLoss(BaseModel):
    day: int
    exit_date: date
    pnl: float
    trades: int


class DailyProfitLossReport(BaseModel):
    year: int
    month: int
    daily_pnl: list[DailyProfitLoss]


class BacktestAnalytics(BaseModel):
    strategy_id: int
    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    win_percentage: float = 0.0
    loss_percentage: float = 0.0
    avg_winning_r: float = 0.0
    avg_loss_r: float = 0.0
    ev: float = 0.0
    days_to_100_trades: int | None = None
