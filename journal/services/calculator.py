"""Position sizing from account balance and risk percentage."""

from journal.services.trade_math import direction


def position_size(
    entry: float,
    stop_loss: float,
    account_balance: float,
    risk_percentage: float,
) -> dict:
    """Size a position so that hitting the stop loses ``risk_percentage`` of the balance.

    Returns risk_amount, trade_value, quantity, leverage and direction. A zero
    entry/stop distance or a zero balance yields zeros instead of dividing.
    """
    risk_amount = account_balance * risk_percentage / 100.0
    difference = abs(entry - stop_loss)
    trade_value = risk_amount / difference * entry if difference else 0.0
    quantity = trade_value / entry if entry else 0.0
    leverage = trade_value / account_balance if account_balance else 0.0
    return {
        "direction": direction(entry, stop_loss),
        "risk_amount": risk_amount,
        "trade_value": trade_value,
        "quantity": quantity,
        "leverage": leverage,
    }
