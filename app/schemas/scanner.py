# app/schemas/scanner.py
from pydantic import EmailStr, ConfigDict
from sqlmodel import SQLModel

from app.schemas.booking import GuestlistEntry
from app.schemas.club import ClubRead


class ClubLoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str


class ClubAuthResponse(SQLModel):
    club: ClubRead
    token: str


class ScanRequest(SQLModel):
    """
    Door scan from the club portal.

    `qr_data` is the raw QR payload: either JSON such as
    {"bookingId": "..."} / {"code": "..."}, or the bare code.
    """

    model_config = ConfigDict(extra="forbid")

    qr_code: str | None = None
    qr_data: str | None = None


class ScanResult(SQLModel):
    valid: bool
    message: str
    event_title: str
    booking: GuestlistEntry
