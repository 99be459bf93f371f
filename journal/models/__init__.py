"""Database models."""

from journal.models.organization import Organization
from journal.models.user import User, UserSettings
from journal.models.coin import Coin
from journal.models.strategy import Strategy
from journal.models.trade import Trade
from journal.models.backtest_trade import BacktestTrade

__all__ = [
    "Organization",
    "User",
    "UserSettings",
    "Coin",
    "Strategy",
    "Trade",
    "BacktestTrade",
]
