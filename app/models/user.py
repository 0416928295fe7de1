# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent user account for AfterHour.

    Identity:
      - email (register/login) OR phone (phone-auth); at least one is set.
      - phone-auth users have no email and no password hash.

    Role:
      - is_admin grants resource mutation; it is copied into the session
        token at login, so promotion only applies to new sessions.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str | None = Field(
        default=None,
        unique=True,
        index=True,
        description="Login email (absent for phone-auth users)",
    )

    phone: str | None = Field(
        default=None,
        unique=True,
        index=True,
        description="Verified phone number",
    )

    password_hash: str | None = Field(
        default=None,
        description="bcrypt hash; never returned to clients",
    )

    name: str = Field(
        max_length=100,
        description="Display name",
    )

    is_admin: bool = Field(
        default=False,
        index=True,
        description="Admin accounts may create/update/delete clubs and events",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
