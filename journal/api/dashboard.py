"""Dashboard API — headline stats, open positions and recent activity."""

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from journal.database import get_session
from journal.models.trade import Trade
from journal.models.user import User
from journal.schemas.trade import TradeRead
from journal.services.analytics import compute_trade_analytics
from journal.api.deps import get_current_user
from journal.utils.constants import RECENT_TRADES_LIMIT

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary")
def dashboard_summary(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Aggregated stats across every trade of the organization."""
    trades = session.exec(
        select(Trade).where(Trade.organization_id == user.organization_id)
    ).all()
    report = compute_trade_analytics(trades)

    recent = sorted(trades, key=lambda t: (t.trade_date, t.trade_time, t.id), reverse=True)
    open_positions = [t for t in recent if t.status == "OPEN"]

    return {
        "total_trades": report.total_trades,
        "open_trades": report.open_trades,
        "closed_trades": report.closed_trades,
        "win_rate": round(report.win_rate, 1),
        "total_pnl": round(report.total_profit_loss, 2),
        "total_fees": round(report.total_fees_paid, 2),
        "best_trade": round(report.best_trade, 2),
        "worst_trade": round(report.worst_trade, 2),
        "open_positions": [
            TradeRead.model_validate(t).model_dump(mode="json") for t in open_positions
        ],
        "recent_trades": [
            TradeRead.model_validate(t).model_dump(mode="json")
            for t in recent[:RECENT_TRADES_LIMIT]
        ],
    }
