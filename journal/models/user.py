"""User and per-user display settings."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    first_name: str
    last_name: str
    hashed_password: str
    role: str = "user"  # "admin" | "user"
    organization_id: int = Field(foreign_key="organization.id", index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserSettings(SQLModel, table=True):
    __tablename__ = "user_settings"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True, index=True)
    currency: str = "USD"
    timezone: str = "UTC"
    date_format: str = "YYYY-MM-DD"
    theme: str = "system"
    compact_mode: bool = False
    table_density: str = "standard"
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
