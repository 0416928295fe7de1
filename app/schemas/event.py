# app/schemas/event.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.club import ClubRead, ClubSummary, check_url, optional_url

GuestlistStatus = Literal["open", "closing", "closed"]


def to_local_naive(v: datetime) -> datetime:
    """Event dates are stored as naive local time."""
    if v.tzinfo is not None:
        return v.astimezone().replace(tzinfo=None)
    return v


class ClubEventCreate(SQLModel):
    """
    Event fields a club may set on its own events (club portal).

    Ownership (`club_id`) and the display `club` name come from the
    caller's token, so neither is accepted here.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=2)
    location: str = Field(min_length=2)
    description: str = Field(min_length=10)
    rules: str | None = None
    genre: str = Field(min_length=2)
    image_url: str
    video_url: str | None = None
    gallery: list[str] = Field(default_factory=list)
    price: float = Field(default=0, ge=0)
    price_label: str = "Free Entry"
    date: datetime
    start_time: str
    end_time: str
    guestlist_status: GuestlistStatus = "open"
    guestlist_limit: int | None = Field(default=None, ge=1)
    closing_threshold: int | None = Field(default=None, ge=1)
    guestlist_close_time: str | None = None
    guestlist_close_on_start: bool = True
    featured: bool = False

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str) -> str:
        return check_url(v)

    @field_validator("video_url")
    @classmethod
    def validate_video_url(cls, v: str | None) -> str | None:
        return optional_url(v)

    @field_validator("gallery")
    @classmethod
    def validate_gallery(cls, v: list[str]) -> list[str]:
        return [check_url(url) for url in v]

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return to_local_naive(v)


class EventCreate(ClubEventCreate):
    """
    Payload for creating an event (admin only).

    The display `club` name is not accepted: it is copied from the club
    referenced by `club_id`.
    """

    club_id: uuid.UUID


class ClubEventUpdate(SQLModel):
    """
    Partial update payload for events.
    Only fields present in the body are applied.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=2)
    location: str | None = Field(default=None, min_length=2)
    description: str | None = Field(default=None, min_length=10)
    rules: str | None = None
    genre: str | None = Field(default=None, min_length=2)
    image_url: str | None = None
    video_url: str | None = None
    gallery: list[str] | None = None
    price: float | None = Field(default=None, ge=0)
    price_label: str | None = None
    date: datetime | None = None
    start_time: str | None = None
    end_time: str | None = None
    guestlist_status: GuestlistStatus | None = None
    guestlist_limit: int | None = Field(default=None, ge=1)
    closing_threshold: int | None = Field(default=None, ge=1)
    guestlist_close_time: str | None = None
    guestlist_close_on_start: bool | None = None
    featured: bool | None = None

    @field_validator(
        "title",
        "location",
        "description",
        "genre",
        "image_url",
        "gallery",
        "price",
        "price_label",
        "date",
        "start_time",
        "end_time",
        "guestlist_status",
        "guestlist_close_on_start",
        "featured",
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str) -> str:
        return check_url(v)

    @field_validator("video_url")
    @classmethod
    def validate_video_url(cls, v: str | None) -> str | None:
        return optional_url(v)

    @field_validator("gallery")
    @classmethod
    def validate_gallery(cls, v: list[str]) -> list[str]:
        return [check_url(url) for url in v]

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return to_local_naive(v)


class EventUpdate(ClubEventUpdate):
    """Admin partial update; may also move the event to another club."""

    club_id: uuid.UUID | None = None

    @field_validator("club_id")
    @classmethod
    def club_not_null(cls, v: uuid.UUID | None) -> uuid.UUID:
        if v is None:
            raise ValueError("field cannot be null")
        return v


class EventRead(SQLModel):
    """
    Event representation for clients, annotated with live guestlist
    numbers (recomputed from bookings on every read).
    """

    id: uuid.UUID
    title: str
    club: str
    club_id: uuid.UUID
    club_ref: ClubSummary | None = None
    location: str
    description: str
    rules: str | None = None
    genre: str
    image_url: str
    video_url: str | None = None
    gallery: list[str]
    price: float
    price_label: str
    date: datetime
    start_time: str
    end_time: str
    guestlist_status: GuestlistStatus
    guestlist_limit: int | None = None
    closing_threshold: int | None = None
    guestlist_close_time: str | None = None
    guestlist_close_on_start: bool
    featured: bool
    created_at: datetime

    booking_count: int = 0
    total_guests: int = 0
    spots_remaining: int | None = None


class ClubEventRead(EventRead):
    """Club-portal view: also counts guests already checked in at the door."""

    scanned_count: int = 0


class ClubDetail(ClubRead):
    """Single club with its upcoming events."""

    events: list[EventRead]
