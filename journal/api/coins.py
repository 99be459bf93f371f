"""CRUD API for coin master data."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select, or_

from journal.database import get_session
from journal.models.backtest_trade import BacktestTrade
from journal.models.coin import Coin
from journal.models.trade import Trade
from journal.models.user import User
from journal.schemas.coin import CoinCreate, CoinUpdate, CoinRead
from journal.schemas.pagination import Page, Pagination
from journal.api.deps import count_rows, get_current_user, get_owned, reject_cleared

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/masters/coins", tags=["coins"])


def _ensure_unique_symbol(session: Session, user: User, symbol: str, exclude_id: int | None = None):
    stmt = select(Coin).where(Coin.organization_id == user.organization_id, Coin.symbol == symbol)
    existing = session.exec(stmt).first()
    if existing and existing.id != exclude_id:
        raise HTTPException(status_code=409, detail=f"Coin {symbol} already exists")


@router.get("", response_model=Page[CoinRead])
def list_coins(
    search: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = select(Coin).where(Coin.organization_id == user.organization_id).order_by(Coin.symbol)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(Coin.symbol.ilike(pattern), Coin.name.ilike(pattern)))
    total = count_rows(session, stmt)
    stmt = stmt.offset(offset).limit(limit)
    return Page[CoinRead](
        items=[CoinRead.model_validate(row) for row in session.exec(stmt).all()],
        pagination=Pagination.build(total, limit, offset),
    )


@router.post("", response_model=CoinRead, status_code=201)
def create_coin(
    data: CoinCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    _ensure_unique_symbol(session, user, data.symbol)
    coin = Coin(**data.model_dump(), organization_id=user.organization_id, created_by=user.id)
    session.add(coin)
    session.commit()
    session.refresh(coin)
    return coin


@router.get("/{coin_id}", response_model=CoinRead)
def get_coin(
    coin_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return get_owned(session, Coin, coin_id, user, "Coin")


@router.put("/{coin_id}", response_model=CoinRead)
def update_coin(
    coin_id: int,
    data: CoinUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    coin = get_owned(session, Coin, coin_id, user, "Coin")
    update_data = data.model_dump(exclude_unset=True)
    reject_cleared(update_data, ("symbol", "name"))
    if update_data.get("symbol"):
        _ensure_unique_symbol(session, user, update_data["symbol"], exclude_id=coin.id)

    for key, value in update_data.items():
        setattr(coin, key, value)
    coin.updated_at = datetime.now(timezone.utc)

    session.add(coin)
    session.commit()
    session.refresh(coin)
    return coin


@router.delete("/{coin_id}", status_code=204)
def delete_coin(
    coin_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    coin = get_owned(session, Coin, coin_id, user, "Coin")

    in_use = session.exec(select(Trade.id).where(Trade.coin_id == coin_id)).first()
    in_use = in_use or session.exec(
        select(BacktestTrade.id).where(BacktestTrade.coin_id == coin_id)
    ).first()
    if in_use:
        logger.info(f"Refusing to delete coin {coin_id}: referenced by trades")
        raise HTTPException(
            status_code=409,
            detail="Cannot delete a coin that trades reference. Delete those trades first.",
        )

    session.delete(coin)
    session.commit()
