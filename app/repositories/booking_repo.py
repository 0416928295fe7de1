# app/repositories/booking_repo.py
import uuid

from sqlmodel import Session, select

from app.models.booking import Booking
from app.models.user import User


class BookingRepository:
    """Data access layer for Booking."""

    def get_by_id(self, session: Session, booking_id: uuid.UUID) -> Booking | None:
        return session.get(Booking, booking_id)

    def get_by_qr_code(self, session: Session, qr_code: str) -> Booking | None:
        stmt = select(Booking).where(Booking.qr_code == qr_code)
        return session.exec(stmt).first()

    def list_for_event(self, session: Session, event_id: uuid.UUID) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.event_id == event_id)
            .order_by(Booking.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_guests_for_event(
        self,
        session: Session,
        event_id: uuid.UUID,
    ) -> list[tuple[Booking, User]]:
        """Bookings for an event joined with the booking user, oldest first."""
        stmt = (
            select(Booking, User)
            .join(User, User.id == Booking.user_id)
            .where(Booking.event_id == event_id)
            .order_by(Booking.created_at)
        )
        return list(session.exec(stmt).all())

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def get_for_user_and_event(
        self,
        session: Session,
        user_id: uuid.UUID,
        event_id: uuid.UUID,
    ) -> Booking | None:
        stmt = select(Booking).where(
            Booking.user_id == user_id, Booking.event_id == event_id
        )
        return session.exec(stmt).first()

    def create(self, session: Session, booking: Booking) -> Booking:
        """
        Insert a Booking without committing.

        The service commits once the event's guestlist status has been
        updated in the same transaction.
        """
        session.add(booking)
        session.flush()
        session.refresh(booking)
        return booking

    def update(self, session: Session, booking: Booking) -> Booking:
        session.add(booking)
        session.commit()
        session.refresh(booking)
        return booking

    def delete(self, session: Session, booking: Booking) -> None:
        session.delete(booking)
        session.commit()
