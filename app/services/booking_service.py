# app/services/booking_service.py
import json
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from app.core.auth import Principal
from app.core.errors import Conflict, Forbidden, NotFound, ValidationFailed
from app.models.booking import Booking
from app.models.club import Club
from app.models.user import User
from app.repositories.booking_repo import BookingRepository
from app.repositories.event_repo import EventRepository
from app.repositories.user_repo import UserRepository
from app.schemas.booking import BookingCreate, BookingRead, BookingStatus, GuestlistEntry
from app.schemas.scanner import ScanRequest, ScanResult
from app.services.guestlist import guests_in, next_guestlist_status, spots_remaining, total_guests

logger = logging.getLogger(__name__)


def extract_scan_code(payload: ScanRequest) -> str:
    """
    Booking id or QR code carried by a door scan.

    `qr_code` wins over `qr_data`. A JSON `qr_data` must carry
    `bookingId` or `code`; anything else is taken as the bare code.
    """
    if payload.qr_code and payload.qr_code.strip():
        return payload.qr_code.strip()

    raw = (payload.qr_data or "").strip()
    if not raw:
        raise ValidationFailed("QR code is required")

    try:
        data = json.loads(raw)
    except ValueError:
        return raw

    if isinstance(data, dict):
        code = data.get("bookingId") or data.get("code")
        if not isinstance(code, str) or not code.strip():
            raise ValidationFailed("Invalid QR payload")
        return code.strip()
    return raw


class BookingService:
    """
    Business logic for guestlist bookings.

    Responsibilities:
      - capacity checks against the event's guestlist limit
      - one booking per user per event
      - moving the event to closing / closed as it fills up
      - ownership checks for viewing / cancelling
      - door check-in from the club portal
    """

    def __init__(
        self,
        repo: BookingRepository,
        event_repo: EventRepository,
        user_repo: UserRepository,
    ):
        self.repo = repo
        self.event_repo = event_repo
        self.user_repo = user_repo

    @staticmethod
    def _to_read(booking: Booking) -> BookingRead:
        return BookingRead.model_validate(
            booking, update={"total_guests": guests_in(booking)}
        )

    @staticmethod
    def _to_entry(booking: Booking, user: User | None) -> GuestlistEntry:
        return GuestlistEntry.model_validate(
            booking,
            update={
                "total_guests": guests_in(booking),
                "guest_name": user.name if user else "Unknown guest",
                "guest_phone": user.phone if user else None,
            },
        )

    def _find(self, session: Session, identifier: str) -> Booking | None:
        """Look a booking up by id first, then by QR code."""
        try:
            booking = self.repo.get_by_id(session, uuid.UUID(identifier))
        except ValueError:
            booking = None
        return booking or self.repo.get_by_qr_code(session, identifier)

    # ----- Guest side -----

    def create_booking(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: BookingCreate,
    ) -> BookingRead:
        """
        Add the caller to an event's guestlist.

        Raises:
            ValidationFailed: no guests, guestlist closed, or not enough spots.
            NotFound: event does not exist.
            Conflict: the caller already has a booking for this event.
        """
        new_guests = guests_in(payload)
        if new_guests == 0:
            raise ValidationFailed("Must have at least one guest")

        event = self.event_repo.get_by_id(session, payload.event_id)
        if not event:
            raise NotFound("Event not found")
        if event.guestlist_status == "closed":
            raise ValidationFailed("Guestlist is closed for this event")

        current = total_guests(self.repo.list_for_event(session, event.id))
        remaining = spots_remaining(event.guestlist_limit, current)
        if remaining is not None and new_guests > remaining:
            raise ValidationFailed(f"Only {max(remaining, 0)} spots remaining on the guestlist")

        if self.repo.get_for_user_and_event(session, user_id, event.id) is not None:
            raise Conflict("You already have a booking for this event")

        booking = self.repo.create(
            session,
            Booking(
                event_id=event.id,
                user_id=user_id,
                couples=payload.couples,
                ladies=payload.ladies,
                stags=payload.stags,
            ),
        )

        status = next_guestlist_status(event, current + new_guests)
        if status != event.guestlist_status:
            logger.info("Event %s guestlist %s -> %s", event.id, event.guestlist_status, status)
            event.guestlist_status = status
            session.add(event)

        session.commit()
        session.refresh(booking)
        return self._to_read(booking)

    def list_my_bookings(self, session: Session, user_id: uuid.UUID) -> list[BookingRead]:
        return [self._to_read(b) for b in self.repo.list_for_user(session, user_id)]

    def get_booking(
        self,
        session: Session,
        principal: Principal,
        identifier: str,
    ) -> BookingRead:
        """
        One booking by id or QR code, for its owner or an admin.
        """
        booking = self._find(session, identifier)
        if not booking:
            raise NotFound("Booking not found")
        if booking.user_id != principal.user_id and not principal.is_admin:
            raise Forbidden("Access denied")
        return self._to_read(booking)

    def cancel_booking(
        self,
        session: Session,
        principal: Principal,
        booking_id: uuid.UUID,
    ) -> None:
        """
        Cancel a booking. Owners may cancel their own; admins any.
        """
        booking = self.repo.get_by_id(session, booking_id)
        if not booking:
            raise NotFound("Booking not found")
        if booking.user_id != principal.user_id and not principal.is_admin:
            raise Forbidden("Access denied")
        self.repo.delete(session, booking)

    # ----- Admin -----

    def list_event_bookings(self, session: Session, event_id: uuid.UUID) -> list[BookingRead]:
        if not self.event_repo.get_by_id(session, event_id):
            raise NotFound("Event not found")
        return [self._to_read(b) for b in self.repo.list_for_event(session, event_id)]

    def update_status(
        self,
        session: Session,
        booking_id: uuid.UUID,
        status: BookingStatus,
    ) -> BookingRead:
        booking = self.repo.get_by_id(session, booking_id)
        if not booking:
            raise NotFound("Booking not found")
        booking.status = status
        return self._to_read(self.repo.update(session, booking))

    # ----- Club portal -----

    def club_guestlist(
        self,
        session: Session,
        club: Club,
        event_id: uuid.UUID,
    ) -> list[GuestlistEntry]:
        """
        Door list for one of the club's events.

        Another club's event is reported as missing.
        """
        event = self.event_repo.get_by_id(session, event_id)
        if not event or event.club_id != club.id:
            raise NotFound("Event not found")
        return [
            self._to_entry(booking, user)
            for booking, user in self.repo.list_guests_for_event(session, event.id)
        ]

    def scan(self, session: Session, club: Club, payload: ScanRequest) -> ScanResult:
        """
        Check a booking in at the door. Each booking can be scanned once.

        Raises:
            ValidationFailed: no code, cancelled booking, or already scanned.
            NotFound: no booking matches the code.
            Forbidden: the booking is for another club's event.
        """
        booking = self._find(session, extract_scan_code(payload))
        if not booking:
            raise NotFound("Booking not found")

        event = self.event_repo.get_by_id(session, booking.event_id)
        if not event or event.club_id != club.id:
            raise Forbidden("This booking is for another club's event")
        if booking.status == "cancelled":
            raise ValidationFailed("Booking has been cancelled")
        if booking.scanned_at is not None:
            raise ValidationFailed(f"Already checked in at {booking.scanned_at.isoformat()}")

        booking.scanned_at = datetime.now(timezone.utc)
        booking.scanned_by_club_id = club.id
        booking.status = "checked-in"
        booking = self.repo.update(session, booking)
        logger.info("Club %s checked in booking %s", club.id, booking.id)

        return ScanResult(
            valid=True,
            message="Check-in successful",
            event_title=event.title,
            booking=self._to_entry(booking, self.user_repo.get_by_id(session, booking.user_id)),
        )
