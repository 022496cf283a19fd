"""Pydantic schemas for auth and profile."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


def required_text(value: str, label: str, max_length: int) -> str:
    """Trim and reject blank or over-long free text."""
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{label} is required")
    if len(value) > max_length:
        raise ValueError(f"{label} must be at most {max_length} characters")
    return value


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    display_name: str

    @field_validator("display_name")
    @classmethod
    def _display_name(cls, v: str) -> str:
        return required_text(v, "Display name", 100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    user_id: str
    email: str
    display_name: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserOut


class SessionOut(BaseModel):
    session_id: str
    expires_at: datetime
    user: UserOut


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6, max_length=128)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)


class ProfileUpdate(BaseModel):
    display_name: str

    @field_validator("display_name")
    @classmethod
    def _display_name(cls, v: str) -> str:
        return required_text(v, "Display name", 100)
