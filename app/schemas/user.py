# app/schemas/user.py
import uuid
from datetime import datetime

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

MAX_PASSWORD_BYTES = 72


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


class RegisterRequest(SQLModel):
    """
    Payload for email/password sign-up.

    Validation rules:
      - email must be a valid EmailStr
      - password: at least 6 chars and at most 72 UTF-8 bytes (bcrypt limit)
      - name: at least 2 chars after trimming
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    name: str = Field(min_length=2, max_length=100)
    phone: str | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = _strip_required(v)
        if len(v) < 2:
            raise ValueError("name must be at least 2 characters")
        return v

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class LoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str


class PhoneAuthRequest(SQLModel):
    """
    Payload sent by the mobile app after the identity provider has
    verified the phone number. The number itself is trusted as-is.
    """

    model_config = ConfigDict(extra="forbid")

    phone: str = Field(min_length=10, max_length=20)
    name: str = Field(min_length=2, max_length=100)

    @field_validator("phone", "name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_required(v)


class UserRead(SQLModel):
    """Response schema returned to clients (never includes the hash)."""

    id: uuid.UUID
    email: str | None = None
    phone: str | None = None
    name: str
    is_admin: bool
    created_at: datetime


class AuthResponse(SQLModel):
    user: UserRead
    token: str
