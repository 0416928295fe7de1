# app/models/booking.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Booking(SQLModel, table=True):
    """
    One guestlist submission for an event.

    Head count = couples * 2 + ladies + stags.

    Check-in:
      - qr_code is what the guest shows at the door
      - scanned_at / scanned_by_club_id are set once by the club portal
    """

    __tablename__ = "bookings"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    event_id: uuid.UUID = Field(
        foreign_key="events.id",
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    couples: int = Field(default=0, ge=0)
    ladies: int = Field(default=0, ge=0)
    stags: int = Field(default=0, ge=0)

    # confirmed | checked-in | cancelled
    status: str = Field(default="confirmed", index=True)

    qr_code: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        unique=True,
        index=True,
        description="Opaque code encoded in the guest's QR",
    )

    scanned_at: datetime | None = Field(
        default=None,
        description="Door check-in timestamp (UTC)",
    )
    scanned_by_club_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="clubs.id",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
