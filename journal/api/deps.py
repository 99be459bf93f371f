"""Shared API dependencies."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session, func, select

from journal.database import get_session
from journal.models.user import User
from journal.services.auth import decode_access_token

bearer_scheme = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User:
    """Validate JWT and return the current user."""
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    user = session.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return user


def get_owned(session: Session, model, row_id: int, user: User, label: str):
    """Fetch a row belonging to the user's organization or raise 404."""
    row = session.get(model, row_id)
    if not row or row.organization_id != user.organization_id:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return row


def reject_cleared(update_data: dict, required: tuple[str, ...]) -> None:
    """422 when a partial update sets a required column to null."""
    for key in required:
        if key in update_data and update_data[key] is None:
            raise HTTPException(status_code=422, detail=f"{key} cannot be cleared")


def count_rows(session: Session, stmt) -> int:
    """Row count of a select statement before offset/limit are applied."""
    return session.exec(select(func.count()).select_from(stmt.subquery())).one()
