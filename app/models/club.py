# app/models/club.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Club(SQLModel, table=True):
    """
    Venue hosting events.

    email/password_hash are the club-portal credentials; they stay empty
    until an admin generates them.
    """

    __tablename__ = "clubs"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        index=True,
        description="Display name; also copied onto each Event.club",
    )

    location: str = Field(description="Area / neighbourhood")
    address: str | None = None
    map_url: str | None = None
    description: str | None = None

    image_url: str = Field(description="Cover image URL")

    email: str | None = Field(
        default=None,
        unique=True,
        index=True,
        description="Synthetic club-portal login",
    )
    password_hash: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
