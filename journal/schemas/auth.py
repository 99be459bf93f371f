"""Pydantic schemas for authentication, profile and settings."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from journal.utils.constants import TABLE_DENSITIES, THEMES


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=80)
    last_name: str = Field(min_length=1, max_length=80)
    organization_name: str | None = Field(default=None, max_length=120)

    @field_validator("first_name", "last_name")
    @classmethod
    def _trim_required_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class UserRead(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    organization_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class ProfileUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=80)
    last_name: str | None = Field(default=None, min_length=1, max_length=80)

    @field_validator("first_name", "last_name")
    @classmethod
    def _trim_optional_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class SettingsRead(BaseModel):
    currency: str
    timezone: str
    date_format: str
    theme: str
    compact_mode: bool
    table_density: str
    updated_at: datetime

    model_config = {"from_attributes": True}


class SettingsUpdate(BaseModel):
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    timezone: str | None = Field(default=None, min_length=1, max_length=64)
    date_format: str | None = Field(default=None, min_length=1, max_length=32)
    theme: str | None = None
    compact_mode: bool | None = None
    table_density: str | None = None

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str | None) -> str | None:
        return value.upper() if value is not None else None

    @field_validator("theme")
    @classmethod
    def _validate_theme(cls, value: str | None) -> str | None:
        if value is not None and value not in THEMES:
            raise ValueError(f"must be one of: {', '.join(THEMES)}")
        return value

    @field_validator("table_density")
    @classmethod
    def _validate_density(cls, value: str | None) -> str | None:
        if value is not None and value not in TABLE_DENSITIES:
            raise ValueError(f"must be one of: {', '.join(TABLE_DENSITIES)}")
        return value
