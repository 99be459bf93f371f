"""Trade analytics engine.

Turns a (pre-filtered) collection of trades into a ``TradeAnalytics`` report:
headline totals, win rate, best/worst trade, per-coin and per-strategy
breakdowns and a holding-period histogram.

The computation is pure. It performs no I/O, never mutates its input and
returns the same report for the same trades. Ratios over an empty set are 0,
never NaN or infinity, and best/worst trade default to 0 when nothing has
closed. Sums go through ``math.fsum`` so totals do not depend on input order.
"""

import calendar
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Iterable, Mapping

from journal.schemas.analytics import (
    CoinBreakdown,
    DailyProfitLoss,
    StrategyBreakdown,
    TradeAnalytics,
)
from journal.services import trade_math
from journal.services.trade_math import InvalidTradeError
from journal.utils.constants import DURATION_BUCKETS


@dataclass
class _Bucket:
    pnls: list[float] = field(default_factory=list)

    @property
    def trades(self) -> int:
        return len(self.pnls)

    @property
    def win_rate(self) -> float:
        return win_rate(self.pnls)

    @property
    def profit_loss(self) -> float:
        return math.fsum(self.pnls)


def win_rate(pnls: list[float]) -> float:
    """Percentage of P&L values strictly above zero; 0 for an empty list."""
    if not pnls:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls) * 100.0


def _average(values: list[float]) -> float:
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def group_by(closed: list[tuple[Any, float]], key: Callable[[Any], Any]) -> dict[Any, _Bucket]:
    """Reduce (trade, net P&L) pairs into buckets keyed by ``key(trade)``, insertion-ordered."""
    buckets: dict[Any, _Bucket] = {}
    for trade, pnl in closed:
        buckets.setdefault(key(trade), _Bucket()).pnls.append(pnl)
    return buckets


def duration_bucket(hours: float) -> str:
    """Label of the first band whose exclusive upper bound exceeds ``hours``."""
    for upper, label in DURATION_BUCKETS:
        if hours < upper:
            return label
    return DURATION_BUCKETS[-1][1]


def _check_closed(trade) -> None:
    if trade.avg_exit is None or trade.exit_date is None or trade.exit_time is None:
        raise InvalidTradeError(f"Closed trade {getattr(trade, 'id', None)} has no exit fields")


def compute_trade_analytics(
    trades: Iterable,
    coins: Mapping[int, Any] | None = None,
    strategies: Mapping[int, Any] | None = None,
) -> TradeAnalytics:
    """Build the analytics report for ``trades``.

    ``coins`` and ``strategies`` map ids to rows and are only used to label
    the breakdowns. A CLOSED trade without exit fields raises
    ``InvalidTradeError``.
    """
    coins = coins or {}
    strategies = strategies or {}
    trades = list(trades)

    open_trades = [t for t in trades if t.status != "CLOSED"]
    closed_trades = [t for t in trades if t.status == "CLOSED"]
    for trade in closed_trades:
        _check_closed(trade)

    closed = [(t, trade_math.net_profit_loss(t)) for t in closed_trades]
    pnls = [pnl for _, pnl in closed]

    fees = [trade_math.entry_fee(t) + trade_math.exit_fee(t) for t in closed_trades]
    fees += [trade_math.entry_fee(t) for t in open_trades]

    by_duration = {label: 0 for _, label in DURATION_BUCKETS}
    for trade in closed_trades:
        by_duration[duration_bucket(trade_math.duration_hours(trade))] += 1

    by_coin = []
    for coin_id, bucket in group_by(closed, lambda t: t.coin_id).items():
        coin = coins.get(coin_id)
        by_coin.append(CoinBreakdown(
            coin_id=coin_id,
            coin_symbol=coin.symbol if coin else "",
            coin_name=coin.name if coin else "",
            trades=bucket.trades,
            win_rate=bucket.win_rate,
            profit_loss=bucket.profit_loss,
        ))

    by_strategy = []
    for strategy_id, bucket in group_by(closed, lambda t: t.strategy_id).items():
        strategy = strategies.get(strategy_id) if strategy_id is not None else None
        by_strategy.append(StrategyBreakdown(
            strategy_id=strategy_id,
            strategy_name=strategy.name if strategy else "",
            trades=bucket.trades,
            win_rate=bucket.win_rate,
            profit_loss=bucket.profit_loss,
        ))

    return TradeAnalytics(
        total_trades=len(trades),
        open_trades=len(open_trades),
        closed_trades=len(closed_trades),
        win_rate=win_rate(pnls),
        total_profit_loss=math.fsum(pnls),
        total_fees_paid=math.fsum(fees),
        average_profit_loss=_average(pnls),
        best_trade=max(pnls) if pnls else 0.0,
        worst_trade=min(pnls) if pnls else 0.0,
        by_coin=by_coin,
        by_strategy=by_strategy,
        by_duration=by_duration,
    )


def daily_profit_loss(trades: Iterable, year: int, month: int) -> list[DailyProfitLoss]:
    """Net P&L and trade count per exit day of ``year``/``month``, for closed trades."""
    _, days_in_month = calendar.monthrange(year, month)
    first, last = date(year, month, 1), date(year, month, days_in_month)

    per_day: dict[date, list[float]] = {}
    for trade in trades:
        if trade.status != "CLOSED":
            continue
        _check_closed(trade)
        if first <= trade.exit_date <= last:
            per_day.setdefault(trade.exit_date, []).append(trade_math.net_profit_loss(trade))

    return [
        DailyProfitLoss(day=d.day, exit_date=d, pnl=math.fsum(pnls), trades=len(pnls))
        for d, pnls in sorted(per_day.items())
    ]
