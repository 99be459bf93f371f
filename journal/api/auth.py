"""Authentication API — signup, login, profile and display settings."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from journal.database import get_session
from journal.models.user import User
from journal.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    SettingsRead,
    SettingsUpdate,
    SignupRequest,
    UserRead,
)
from journal.services.accounts import (
    DuplicateEmailError,
    create_account,
    get_or_create_settings,
    get_user_by_email,
)
from journal.services.auth import verify_password, create_access_token
from journal.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(user_id=user.id, organization_id=user.organization_id)
    return AuthResponse(access_token=token, user=UserRead.model_validate(user))


@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(body: SignupRequest, session: Session = Depends(get_session)):
    try:
        user = create_account(
            session,
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            organization_name=body.organization_name,
        )
    except DuplicateEmailError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, session: Session = Depends(get_session)):
    user = get_user_by_email(session, body.email)

    if not user or not user.is_active:
        logger.warning(f"Login failed for unknown or inactive account {body.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not verify_password(body.password, user.hashed_password):
        logger.warning(f"Login failed for {user.email}: bad password")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return _auth_response(user)


@router.get("/profile", response_model=UserRead)
def get_profile(user: User = Depends(get_current_user)):
    return user


@router.put("/profile", response_model=UserRead)
def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, key, value)
    user.updated_at = datetime.now(timezone.utc)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@router.get("/settings", response_model=SettingsRead)
def get_settings(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return get_or_create_settings(session, user)


@router.put("/settings", response_model=SettingsRead)
def update_settings(
    data: SettingsUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    prefs = get_or_create_settings(session, user)
    for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(prefs, key, value)
    prefs.updated_at = datetime.now(timezone.utc)
    session.add(prefs)
    session.commit()
    session.refresh(prefs)
    return prefs
