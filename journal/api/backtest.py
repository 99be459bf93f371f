"""Backtest API — hypothetical trades per strategy and their R-multiple analytics."""

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select, or_

from journal.database import get_session
from journal.models.backtest_trade import BacktestTrade
from journal.models.coin import Coin
from journal.models.strategy import Strategy
from journal.models.user import User
from journal.schemas.analytics import BacktestAnalytics
from journal.schemas.backtest import BacktestTradeCreate, BacktestTradeRead, BacktestTradeUpdate
from journal.schemas.pagination import Page, Pagination
from journal.services.backtest import compute_backtest_analytics
from journal.api.deps import get_current_user, get_owned, reject_cleared
from journal.utils.constants import BACKTEST_SORT_FIELDS, DIRECTIONS

router = APIRouter(prefix="/api/backtest", tags=["backtest"])


@router.get("", response_model=Page[BacktestTradeRead])
def list_backtest_trades(
    strategy_id: int | None = None,
    coin_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    direction: str | None = None,
    search: str | None = None,
    sort_by: str = "trade_date",
    sort_order: str = "desc",
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    if direction is not None and direction not in DIRECTIONS:
        raise HTTPException(status_code=422, detail=f"direction must be one of: {', '.join(DIRECTIONS)}")
    if sort_by not in BACKTEST_SORT_FIELDS:
        raise HTTPException(status_code=422, detail=f"sort_by must be one of: {', '.join(BACKTEST_SORT_FIELDS)}")
    if sort_order not in ("asc", "desc"):
        raise HTTPException(status_code=422, detail="sort_order must be asc or desc")

    stmt = select(BacktestTrade).where(BacktestTrade.organization_id == user.organization_id)
    if strategy_id is not None:
        stmt = stmt.where(BacktestTrade.strategy_id == strategy_id)
    if coin_id is not None:
        stmt = stmt.where(BacktestTrade.coin_id == coin_id)
    if date_from is not None:
        stmt = stmt.where(BacktestTrade.trade_date >= date_from)
    if date_to is not None:
        stmt = stmt.where(BacktestTrade.trade_date <= date_to)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.join(Coin, Coin.id == BacktestTrade.coin_id).where(
            or_(Coin.symbol.ilike(pattern), BacktestTrade.notes.ilike(pattern))
        )

    # Direction and R are derived, so filtering/sorting on them happens here.
    rows = [BacktestTradeRead.model_validate(t) for t in session.exec(stmt).all()]
    if direction is not None:
        rows = [r for r in rows if r.direction == direction]

    reverse = sort_order == "desc"
    if sort_by == "trade_date":
        rows.sort(key=lambda r: (r.trade_date, r.trade_time, r.id), reverse=reverse)
    else:
        rows.sort(key=lambda r: (getattr(r, sort_by), r.id), reverse=reverse)
    return Page[BacktestTradeRead](
        items=rows[offset:offset + limit],
        pagination=Pagination.build(len(rows), limit, offset),
    )


@router.get("/analytics/{strategy_id}", response_model=BacktestAnalytics)
def backtest_analytics(
    strategy_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Win rate, average R and expected value of one strategy's backtest sample."""
    get_owned(session, Strategy, strategy_id, user, "Strategy")
    trades = session.exec(
        select(BacktestTrade).where(
            BacktestTrade.organization_id == user.organization_id,
            BacktestTrade.strategy_id == strategy_id,
        )
    ).all()
    return compute_backtest_analytics(strategy_id, trades)


@router.post("", response_model=BacktestTradeRead, status_code=201)
def create_backtest_trade(
    data: BacktestTradeCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    get_owned(session, Coin, data.coin_id, user, "Coin")
    get_owned(session, Strategy, data.strategy_id, user, "Strategy")
    trade = BacktestTrade(**data.model_dump(), organization_id=user.organization_id, created_by=user.id)
    session.add(trade)
    session.commit()
    session.refresh(trade)
    return BacktestTradeRead.model_validate(trade)


@router.get("/{trade_id}", response_model=BacktestTradeRead)
def get_backtest_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return BacktestTradeRead.model_validate(
        get_owned(session, BacktestTrade, trade_id, user, "Backtest trade")
    )


@router.put("/{trade_id}", response_model=BacktestTradeRead)
def update_backtest_trade(
    trade_id: int,
    data: BacktestTradeUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade = get_owned(session, BacktestTrade, trade_id, user, "Backtest trade")
    update_data = data.model_dump(exclude_unset=True)
    reject_cleared(
        update_data,
        ("coin_id", "strategy_id", "trade_date", "trade_time", "entry", "stop_loss", "exit"),
    )
    if "coin_id" in update_data:
        get_owned(session, Coin, update_data["coin_id"], user, "Coin")
    if "strategy_id" in update_data:
        get_owned(session, Strategy, update_data["strategy_id"], user, "Strategy")

    for key, value in update_data.items():
        setattr(trade, key, value)
    trade.updated_at = datetime.now(timezone.utc)

    session.add(trade)
    session.commit()
    session.refresh(trade)
    return BacktestTradeRead.model_validate(trade)


@router.delete("/{trade_id}", status_code=204)
def delete_backtest_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade = get_owned(session, BacktestTrade, trade_id, user, "Backtest trade")
    session.delete(trade)
    session.commit()
