"""Account provisioning shared by the signup endpoint and the CLI."""

import logging

from sqlmodel import Session, select

from journal.models.organization import Organization
from journal.models.user import User, UserSettings
from journal.services.auth import hash_password

logger = logging.getLogger(__name__)


class DuplicateEmailError(ValueError):
    """An account with this e-mail address already exists."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(session: Session, email: str) -> User | None:
    return session.exec(select(User).where(User.email == normalize_email(email))).first()


def create_account(
    session: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    organization_name: str | None = None,
    role: str = "admin",
) -> User:
    """Create an organization, its first user and default settings in one commit."""
    if get_user_by_email(session, email):
        raise DuplicateEmailError(f"User '{normalize_email(email)}' already exists")

    org = Organization(name=organization_name or f"{first_name}'s journal")
    session.add(org)
    session.flush()

    user = User(
        email=normalize_email(email),
        first_name=first_name,
        last_name=last_name,
        hashed_password=hash_password(password),
        role=role,
        organization_id=org.id,
    )
    session.add(user)
    session.flush()

    session.add(UserSettings(user_id=user.id))
    session.commit()
    session.refresh(user)
    logger.info(f"Created account {user.email} in organization {org.id}")
    return user


def get_or_create_settings(session: Session, user: User) -> UserSettings:
    prefs = session.exec(select(UserSettings).where(UserSettings.user_id == user.id)).first()
    if prefs is None:
        prefs = UserSettings(user_id=user.id)
        session.add(prefs)
        session.commit()
        session.refresh(prefs)
    return prefs
