# app/models/event.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import SQLModel, Field


class Event(SQLModel, table=True):
    """
    Club night with a guestlist.

    `club` is the display name of the owning club (club_id). It is kept
    in sync by the services and is never accepted from clients.
    """

    __tablename__ = "events"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str
    club: str = Field(description="Owning club's name at write time")
    club_id: uuid.UUID = Field(
        foreign_key="clubs.id",
        index=True,
    )

    location: str
    description: str
    rules: str | None = None
    genre: str = Field(index=True)

    image_url: str
    video_url: str | None = None
    gallery: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    price: float = Field(default=0, ge=0)
    price_label: str = "Free Entry"

    # Naive local datetime; the `upcoming` filter compares against local midnight.
    # Explicit column so SQLModel does not map it to a tz-aware UTC type.
    date: datetime = Field(
        sa_column=Column(DateTime(timezone=False), nullable=False, index=True),
    )
    start_time: str
    end_time: str

    # open | closing | closed
    guestlist_status: str = Field(default="open", index=True)
    guestlist_limit: int | None = Field(default=None, ge=1)
    closing_threshold: int | None = Field(default=None, ge=1)
    guestlist_close_time: str | None = None
    guestlist_close_on_start: bool = True

    featured: bool = Field(default=False, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
