# app/routers/bookings.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import Principal, require_admin, require_auth
from app.database import get_session
from app.repositories.booking_repo import BookingRepository
from app.repositories.event_repo import EventRepository
from app.repositories.user_repo import UserRepository
from app.schemas.booking import BookingCreate, BookingRead, BookingStatusUpdate
from app.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])

booking_repo = BookingRepository()
event_repo = EventRepository()
user_repo = UserRepository()
service = BookingService(booking_repo, event_repo, user_repo)


# -------- User-facing endpoints --------


@router.post(
    "",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
)
def create_booking(
    payload: BookingCreate,
    session: Session = Depends(get_session),
    principal: Principal = Depends(require_auth),
):
    """
    Join an event's guestlist.

    Errors:
      - 400 no guests / guestlist closed / not enough spots / duplicate
      - 404 unknown event
    """
    return service.create_booking(session, principal.user_id, payload)


@router.get("/my", response_model=list[BookingRead])
def list_my_bookings(
    session: Session = Depends(get_session),
    principal: Principal = Depends(require_auth),
):
    """
    The caller's bookings, newest first.
    """
    return service.list_my_bookings(session, principal.user_id)


@router.get("/{identifier}", response_model=BookingRead)
def read_booking(
    identifier: str,
    session: Session = Depends(get_session),
    principal: Principal = Depends(require_auth),
):
    """
    One booking by id or QR code (owner or admin).
    """
    return service.get_booking(session, principal, identifier)


@router.delete("/{booking_id}")
def cancel_booking(
    booking_id: uuid.UUID,
    session: Session = Depends(get_session),
    principal: Principal = Depends(require_auth),
) -> dict[str, str]:
    """
    Cancel a booking (owner or admin).
    """
    service.cancel_booking(session, principal, booking_id)
    return {"message": "Booking cancelled successfully"}


# -------- Admin endpoints --------


@router.get(
    "/event/{event_id}",
    response_model=list[BookingRead],
    dependencies=[Depends(require_admin)],
)
def list_event_bookings(
    event_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    All bookings for an event (admin only).
    """
    return service.list_event_bookings(session, event_id)


@router.patch(
    "/{booking_id}/status",
    response_model=BookingRead,
    dependencies=[Depends(require_admin)],
)
def update_booking_status(
    booking_id: uuid.UUID,
    payload: BookingStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Set a booking to confirmed / checked-in / cancelled (admin only).
    """
    return service.update_status(session, booking_id, payload.status)
