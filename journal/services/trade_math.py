"""Per-trade derivations: direction, fees, profit/loss and holding duration.

Every function here reads a trade-like object (a ``Trade`` row or anything
exposing the same attributes) and never modifies it. Profit/loss always uses
the long formula ``(avg_exit - avg_entry) * quantity``; direction is derived
from entry vs stop-loss and reported alongside.
"""

from datetime import datetime


class InvalidTradeError(ValueError):
    """A trade record violates the journal's invariants (e.g. CLOSED without exit fields)."""


def direction(entry: float, stop_loss: float) -> str:
    """'Short' when the stop sits above the entry, otherwise 'Long'."""
    return "Short" if entry < stop_loss else "Long"


def fee_amount(fee_pct: float | None, price: float, quantity: float) -> float:
    if not fee_pct:
        return 0.0
    return fee_pct / 100.0 * price * quantity


def trade_value(trade) -> float:
    return trade.avg_entry * trade.quantity


def stop_loss_percentage(trade) -> float:
    return abs(trade.avg_entry - trade.stop_loss) / trade.avg_entry * 100.0


def entry_fee(trade) -> float:
    return fee_amount(trade.entry_fee_percentage, trade.avg_entry, trade.quantity)


def _require_exit(trade) -> None:
    missing = [
        name for name in ("avg_exit", "exit_date", "exit_time")
        if getattr(trade, name, None) is None
    ]
    if missing:
        raise InvalidTradeError(
            f"Trade {getattr(trade, 'id', None)} is {trade.status} but lacks {', '.join(missing)}"
        )


def exit_fee(trade) -> float:
    _require_exit(trade)
    return fee_amount(trade.exit_fee_percentage, trade.avg_exit, trade.quantity)


def gross_profit_loss(trade) -> float:
    _require_exit(trade)
    return (trade.avg_exit - trade.avg_entry) * trade.quantity


def profit_loss_percentage(trade) -> float:
    _require_exit(trade)
    return (trade.avg_exit - trade.avg_entry) / trade.avg_entry * 100.0


def net_profit_loss(trade) -> float:
    """Gross P&L minus the entry and exit fee amounts."""
    return gross_profit_loss(trade) - entry_fee(trade) - exit_fee(trade)


def entry_timestamp(trade) -> datetime:
    # Naive local values: date and time are stored separately, without a zone.
    return datetime.combine(trade.trade_date, trade.trade_time)


def exit_timestamp(trade) -> datetime:
    _require_exit(trade)
    return datetime.combine(trade.exit_date, trade.exit_time)


def duration_hours(trade) -> float:
    return (exit_timestamp(trade) - entry_timestamp(trade)).total_seconds() / 3600.0


def preview_exit(trade, avg_exit: float, exit_fee_percentage: float = 0.0) -> dict:
    """Profit/loss an open trade would realise if closed at ``avg_exit``.

    Nothing is persisted; the trade is left untouched.
    """
    gross = (avg_exit - trade.avg_entry) * trade.quantity
    commission = entry_fee(trade) + fee_amount(exit_fee_percentage, avg_exit, trade.quantity)
    return {
        "profit_loss": gross - commission,
        "profit_loss_percentage": (avg_exit - trade.avg_entry) / trade.avg_entry * 100.0,
        "direction": direction(trade.avg_entry, trade.stop_loss),
        "commission": commission,
        "gross_profit_loss": gross,
    }


def derived_fields(trade) -> dict:
    """Computed columns for API read models. Exit-dependent values are None while OPEN."""
    fields = {
        "direction": direction(trade.avg_entry, trade.stop_loss),
        "trade_value": trade_value(trade),
        "stop_loss_percentage": stop_loss_percentage(trade),
        "commission": entry_fee(trade),
        "gross_profit_loss": None,
        "profit_loss": None,
        "profit_loss_percentage": None,
        "duration": None,
    }
    if trade.status == "CLOSED":
        fields.update(
            commission=entry_fee(trade) + exit_fee(trade),
            gross_profit_loss=gross_profit_loss(trade),
            profit_loss=net_profit_loss(trade),
            profit_loss_percentage=profit_loss_percentage(trade),
            duration=duration_hours(trade),
        )
    return fields
