"""Trade journal API — CRUD, closing a position, exit preview and analytics."""

import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select, or_

from journal.database import get_session
from journal.models.coin import Coin
from journal.models.strategy import Strategy
from journal.models.trade import Trade
from journal.models.user import User
from journal.schemas.analytics import DailyProfitLossReport, TradeAnalytics
from journal.schemas.pagination import Page, Pagination
from journal.schemas.trade import (
    PreviewExitRequest,
    PreviewExitResponse,
    TradeCreate,
    TradeExit,
    TradeRead,
    TradeUpdate,
)
from journal.services import trade_math
from journal.services.analytics import compute_trade_analytics, daily_profit_loss
from journal.api.deps import count_rows, get_current_user, get_owned, reject_cleared
from journal.utils.constants import TRADE_STATUSES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"])


def _filtered_stmt(
    user: User,
    status: str | None = None,
    coin_id: int | None = None,
    strategy_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
):
    if status is not None and status not in TRADE_STATUSES:
        raise HTTPException(status_code=422, detail=f"status must be one of: {', '.join(TRADE_STATUSES)}")

    stmt = select(Trade).where(Trade.organization_id == user.organization_id)
    if status is not None:
        stmt = stmt.where(Trade.status == status)
    if coin_id is not None:
        stmt = stmt.where(Trade.coin_id == coin_id)
    if strategy_id is not None:
        stmt = stmt.where(Trade.strategy_id == strategy_id)
    if date_from is not None:
        stmt = stmt.where(Trade.trade_date >= date_from)
    if date_to is not None:
        stmt = stmt.where(Trade.trade_date <= date_to)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.join(Coin, Coin.id == Trade.coin_id).where(
            or_(Coin.symbol.ilike(pattern), Coin.name.ilike(pattern), Trade.notes.ilike(pattern))
        )
    return stmt


def _check_references(session: Session, user: User, coin_id: int | None, strategy_id: int | None):
    if coin_id is not None:
        get_owned(session, Coin, coin_id, user, "Coin")
    if strategy_id is not None:
        get_owned(session, Strategy, strategy_id, user, "Strategy")


@router.get("", response_model=Page[TradeRead])
def list_trades(
    status: str | None = None,
    coin_id: int | None = None,
    strategy_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = _filtered_stmt(user, status, coin_id, strategy_id, date_from, date_to, search)
    stmt = stmt.order_by(Trade.trade_date.desc(), Trade.trade_time.desc(), Trade.id.desc())
    total = count_rows(session, stmt)
    stmt = stmt.offset(offset).limit(limit)
    return Page[TradeRead](
        items=[TradeRead.model_validate(t) for t in session.exec(stmt).all()],
        pagination=Pagination.build(total, limit, offset),
    )


@router.get("/analytics", response_model=TradeAnalytics)
def trade_analytics(
    status: str | None = None,
    coin_id: int | None = None,
    strategy_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Aggregate statistics over the trades matching the filters."""
    trades = session.exec(
        _filtered_stmt(user, status, coin_id, strategy_id, date_from, date_to, search)
    ).all()
    coins = session.exec(select(Coin).where(Coin.organization_id == user.organization_id)).all()
    strategies = session.exec(
        select(Strategy).where(Strategy.organization_id == user.organization_id)
    ).all()
    return compute_trade_analytics(
        trades,
        coins={c.id: c for c in coins},
        strategies={s.id: s for s in strategies},
    )


@router.get("/daily-pnl", response_model=DailyProfitLossReport)
def trade_daily_pnl(
    year: int = Query(ge=1970, le=9999),
    month: int = Query(ge=1, le=12),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Net profit/loss per exit day for the P&L calendar."""
    trades = session.exec(
        select(Trade).where(
            Trade.organization_id == user.organization_id,
            Trade.status == "CLOSED",
        )
    ).all()
    return DailyProfitLossReport(
        year=year, month=month, daily_pnl=daily_profit_loss(trades, year, month)
    )


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(
    data: TradeCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    _check_references(session, user, data.coin_id, data.strategy_id)
    trade = Trade(
        **data.model_dump(),
        status="OPEN",
        organization_id=user.organization_id,
        created_by=user.id,
    )
    session.add(trade)
    session.commit()
    session.refresh(trade)
    return TradeRead.model_validate(trade)


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return TradeRead.model_validate(get_owned(session, Trade, trade_id, user, "Trade"))


@router.put("/{trade_id}", response_model=TradeRead)
def update_trade(
    trade_id: int,
    data: TradeUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade = get_owned(session, Trade, trade_id, user, "Trade")
    if trade.status == "CLOSED":
        raise HTTPException(status_code=409, detail="Closed trades cannot be edited")

    update_data = data.model_dump(exclude_unset=True)
    reject_cleared(
        update_data,
        ("coin_id", "trade_date", "trade_time", "avg_entry", "stop_loss", "quantity"),
    )
    _check_references(session, user, update_data.get("coin_id"), update_data.get("strategy_id"))

    for key, value in update_data.items():
        setattr(trade, key, value)
    trade.updated_at = datetime.now(timezone.utc)

    session.add(trade)
    session.commit()
    session.refresh(trade)
    return TradeRead.model_validate(trade)


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade = get_owned(session, Trade, trade_id, user, "Trade")
    session.delete(trade)
    session.commit()


@router.post("/{trade_id}/exit", response_model=TradeRead)
def exit_trade(
    trade_id: int,
    data: TradeExit,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Record the exit and move the trade to CLOSED. Allowed exactly once."""
    trade = get_owned(session, Trade, trade_id, user, "Trade")
    if trade.status == "CLOSED":
        raise HTTPException(status_code=409, detail="Trade is already closed")

    exit_at = datetime.combine(data.exit_date, data.exit_time)
    if exit_at < trade_math.entry_timestamp(trade):
        raise HTTPException(status_code=422, detail="Exit cannot be earlier than entry")

    trade.exit_date = data.exit_date
    trade.exit_time = data.exit_time
    trade.avg_exit = data.avg_exit
    trade.exit_fee_percentage = data.exit_fee_percentage
    if data.notes is not None:
        trade.notes = data.notes
    trade.status = "CLOSED"
    trade.updated_at = datetime.now(timezone.utc)

    session.add(trade)
    session.commit()
    session.refresh(trade)
    logger.info(f"Closed trade {trade.id}: net P&L {trade_math.net_profit_loss(trade):.2f}")
    return TradeRead.model_validate(trade)


@router.post("/{trade_id}/preview-exit", response_model=PreviewExitResponse)
def preview_trade_exit(
    trade_id: int,
    data: PreviewExitRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Profit/loss the trade would realise at the given exit price. Nothing is saved."""
    trade = get_owned(session, Trade, trade_id, user, "Trade")
    if trade.status == "CLOSED":
        raise HTTPException(status_code=409, detail="Trade is already closed")
    return trade_math.preview_exit(trade, data.avg_exit, data.exit_fee_percentage)
