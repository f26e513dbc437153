"""Pydantic schemas for authentication requests and responses."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from app.utils.sanitization import sanitize_email, sanitize_text

EMAIL_MAX_CHARS = 64
PASSWORD_MIN_CHARS = 8
PASSWORD_MAX_CHARS = 64

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
# At least one lower, one upper, one digit and one special; nothing else allowed
_STRONG_PASSWORD_RE = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)


def _normalize_email(value: str) -> str:
    email = sanitize_email(value)
    if not _EMAIL_RE.match(email):
        raise ValueError("Please enter a valid email address")
    if len(email) > EMAIL_MAX_CHARS:
        raise ValueError(f"Email must be less than {EMAIL_MAX_CHARS} characters")
    return email


class LoginRequest(BaseModel):
    """Credentials submitted on sign-in."""

    email: str = Field(..., description="Account email (case-insensitive).")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_CHARS,
        max_length=PASSWORD_MAX_CHARS,
        description="Account password.",
    )

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _normalize_email(value)


class RegisterRequest(BaseModel):
    """New account details submitted on sign-up."""

    name: str = Field(..., description="Display name.")
    email: str = Field(..., description="Account email (case-insensitive).")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_CHARS,
        max_length=PASSWORD_MAX_CHARS,
        description="Password with upper, lower, digit and special character.",
    )
    confirm_password: str = Field(..., description="Must match password.")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        name = sanitize_text(value)
        if len(name) < 2:
            raise ValueError("Name must be at least 2 characters.")
        if len(name) > 50:
            raise ValueError("Name must be less than 50 characters.")
        if not _NAME_RE.match(name):
            raise ValueError(
                "Name can only contain letters, spaces, hyphens, and apostrophes."
            )
        return name

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def _check_password_strength(cls, value: str) -> str:
        if not _STRONG_PASSWORD_RE.match(value):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase "
                "letter, one number, and one special character."
            )
        return value

    @model_validator(mode="after")
    def _check_passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match.")
        return self


class PasswordResetRequest(BaseModel):
    """Request to send a password reset link."""

    email: str = Field(..., description="Account email (case-insensitive).")

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserOut(BaseModel):
    """Public view of an account."""

    id: str
    email: str
    name: str
    created_at: datetime


class AuthResponse(BaseModel):
    """Successful sign-in or sign-up."""

    user: UserOut
    message: str


class PasswordResetResponse(BaseModel):
    """Same body whether or not the email is registered."""

    message: str = Field(
        default="If an account exists for this email, a reset link has been sent.",
    )
