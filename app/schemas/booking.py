# app/schemas/booking.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

BookingStatus = Literal["confirmed", "checked-in", "cancelled"]


class BookingCreate(SQLModel):
    """
    Guestlist submission. user_id comes from the token.
    """

    model_config = ConfigDict(extra="forbid")

    event_id: uuid.UUID
    couples: int = Field(default=0, ge=0)
    ladies: int = Field(default=0, ge=0)
    stags: int = Field(default=0, ge=0)


class BookingStatusUpdate(SQLModel):
    """
    Admin payload to change booking status.
    """

    model_config = ConfigDict(extra="forbid")

    status: BookingStatus


class BookingRead(SQLModel):
    id: uuid.UUID
    event_id: uuid.UUID
    user_id: uuid.UUID
    couples: int
    ladies: int
    stags: int
    total_guests: int
    status: BookingStatus
    qr_code: str
    scanned_at: datetime | None = None
    created_at: datetime


class GuestlistEntry(BookingRead):
    """Booking as shown on a club's door list."""

    guest_name: str
    guest_phone: str | None = None

