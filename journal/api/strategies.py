"""CRUD API for trading strategies."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from journal.database import get_session
from journal.models.backtest_trade import BacktestTrade
from journal.models.strategy import Strategy
from journal.models.trade import Trade
from journal.models.user import User
from journal.schemas.strategy import StrategyCreate, StrategyUpdate, StrategyRead
from journal.schemas.pagination import Page, Pagination
from journal.api.deps import count_rows, get_current_user, get_owned, reject_cleared

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/masters/strategies", tags=["strategies"])


def _ensure_unique_name(session: Session, user: User, name: str, exclude_id: int | None = None):
    stmt = select(Strategy).where(
        Strategy.organization_id == user.organization_id, Strategy.name == name
    )
    existing = session.exec(stmt).first()
    if existing and existing.id != exclude_id:
        raise HTTPException(status_code=409, detail=f"Strategy '{name}' already exists")


@router.get("", response_model=Page[StrategyRead])
def list_strategies(
    search: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = (
        select(Strategy)
        .where(Strategy.organization_id == user.organization_id)
        .order_by(Strategy.name)
    )
    if search:
        stmt = stmt.where(Strategy.name.ilike(f"%{search.strip()}%"))
    total = count_rows(session, stmt)
    stmt = stmt.offset(offset).limit(limit)
    return Page[StrategyRead](
        items=[StrategyRead.model_validate(row) for row in session.exec(stmt).all()],
        pagination=Pagination.build(total, limit, offset),
    )


@router.post("", response_model=StrategyRead, status_code=201)
def create_strategy(
    data: StrategyCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    _ensure_unique_name(session, user, data.name)
    strategy = Strategy(**data.model_dump(), organization_id=user.organization_id, created_by=user.id)
    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


@router.get("/{strategy_id}", response_model=StrategyRead)
def get_strategy(
    strategy_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return get_owned(session, Strategy, strategy_id, user, "Strategy")


@router.put("/{strategy_id}", response_model=StrategyRead)
def update_strategy(
    strategy_id: int,
    data: StrategyUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = get_owned(session, Strategy, strategy_id, user, "Strategy")
    update_data = data.model_dump(exclude_unset=True)
    reject_cleared(update_data, ("name",))
    if update_data.get("name"):
        _ensure_unique_name(session, user, update_data["name"], exclude_id=strategy.id)

    for key, value in update_data.items():
        setattr(strategy, key, value)
    strategy.updated_at = datetime.now(timezone.utc)

    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


@router.delete("/{strategy_id}", status_code=204)
def delete_strategy(
    strategy_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = get_owned(session, Strategy, strategy_id, user, "Strategy")

    in_use = session.exec(select(Trade.id).where(Trade.strategy_id == strategy_id)).first()
    in_use = in_use or session.exec(
        select(BacktestTrade.id).where(BacktestTrade.strategy_id == strategy_id)
    ).first()
    if in_use:
        logger.info(f"Refusing to delete strategy {strategy_id}: referenced by trades")
        raise HTTPException(
            status_code=409,
            detail="Cannot delete a strategy that trades reference. Delete those trades first.",
        )

    session.delete(strategy)
    session.commit()
