"""Backtest math: R-multiples and per-strategy expectancy."""

import math
from typing import Iterable

from journal.schemas.analytics import BacktestAnalytics
from journal.services.trade_math import direction

TRADES_TARGET = 100


def r_multiple(entry: float, stop_loss: float, exit: float) -> float:
    """Reward per unit divided by risk per unit; 0 when there is no risk."""
    if direction(entry, stop_loss) == "Long":
        risk = entry - stop_loss
        reward = exit - entry
    else:
        risk = stop_loss - entry
        reward = entry - exit
    if risk == 0:
        return 0.0
    return reward / risk


def _days_to_target(trades: list) -> int | None:
    """Calendar days the sample took (or would take, at its pace) to reach 100 trades."""
    dates = sorted(t.trade_date for t in trades)
    if len(set(dates)) < 2:
        return None
    if len(dates) >= TRADES_TARGET:
        return (dates[TRADES_TARGET - 1] - dates[0]).days + 1
    span = (dates[-1] - dates[0]).days + 1
    return round(span * TRADES_TARGET / len(dates))


def compute_backtest_analytics(strategy_id: int, trades: Iterable) -> BacktestAnalytics:
    """Win/loss split, average winning/losing R and expected value for one strategy."""
    trades = list(trades)
    total = len(trades)
    if total == 0:
        return BacktestAnalytics(strategy_id=strategy_id)

    rs = [r_multiple(t.entry, t.stop_loss, t.exit) for t in trades]
    winners = [r for r in rs if r > 0]
    losers = [r for r in rs if r < 0]

    win_fraction = len(winners) / total
    loss_fraction = len(losers) / total
    avg_win = math.fsum(winners) / len(winners) if winners else 0.0
    avg_loss = math.fsum(losers) / len(losers) if losers else 0.0

    return BacktestAnalytics(
        strategy_id=strategy_id,
        total_trades=total,
        wins=len(winners),
        losses=len(losers),
        win_percentage=win_fraction * 100.0,
        loss_percentage=loss_fraction * 100.0,
        avg_winning_r=avg_win,
        avg_loss_r=avg_loss,
        ev=win_fraction * avg_win + loss_fraction * avg_loss,
        days_to_100_trades=_days_to_target(trades),
    )
