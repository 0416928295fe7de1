# app/repositories/event_repo.py
import uuid
from datetime import datetime

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.booking import Booking
from app.models.club import Club
from app.models.event import Event


class EventRepository:
    """
    Data access layer for Event.

    Filtering is pushed down to SQL; guestlist numbers are computed by
    the service from `list_bookings_for_events`.
    """

    def get_by_id(self, session: Session, event_id: uuid.UUID) -> Event | None:
        return session.get(Event, event_id)

    def list_events(
        self,
        session: Session,
        *,
        genre: str | None = None,
        date_from: datetime | None = None,
        featured: bool | None = None,
        club_id: uuid.UUID | None = None,
    ) -> list[Event]:
        """
        Events ordered by date ascending. All given filters are AND-ed.

        - genre: case-insensitive exact match
        - date_from: inclusive lower bound on Event.date
        """
        stmt = select(Event)
        if genre is not None:
            stmt = stmt.where(func.lower(Event.genre) == genre.lower())
        if date_from is not None:
            stmt = stmt.where(Event.date >= date_from)
        if featured is not None:
            stmt = stmt.where(Event.featured == featured)
        if club_id is not None:
            stmt = stmt.where(Event.club_id == club_id)
        stmt = stmt.order_by(Event.date)
        return list(session.exec(stmt).all())

    def list_bookings_for_events(
        self,
        session: Session,
        event_ids: list[uuid.UUID],
    ) -> list[Booking]:
        if not event_ids:
            return []
        stmt = select(Booking).where(Booking.event_id.in_(event_ids))
        return list(session.exec(stmt).all())

    def get_clubs(self, session: Session, club_ids: set[uuid.UUID]) -> list[Club]:
        if not club_ids:
            return []
        stmt = select(Club).where(Club.id.in_(club_ids))
        return list(session.exec(stmt).all())

    def rename_club(self, session: Session, club_id: uuid.UUID, name: str) -> None:
        """Copy a club's new name onto its events (no commit)."""
        for event in self.list_events(session, club_id=club_id):
            event.club = name
            session.add(event)

    def create(self, session: Session, event: Event) -> Event:
        session.add(event)
        session.commit()
        session.refresh(event)
        return event

    def update(self, session: Session, event: Event) -> Event:
        session.add(event)
        session.commit()
        session.refresh(event)
        return event

    def delete(self, session: Session, event: Event) -> None:
        """Delete an event together with its bookings."""
        stmt = select(Booking).where(Booking.event_id == event.id)
        for booking in session.exec(stmt).all():
            session.delete(booking)
        session.flush()
        session.delete(event)
        session.commit()
