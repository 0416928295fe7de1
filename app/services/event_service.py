# app/services/event_service.py
import uuid
from collections import defaultdict
from datetime import datetime, time

from sqlmodel import Session

from app.core.errors import NotFound
from app.models.booking import Booking
from app.models.club import Club
from app.models.event import Event
from app.repositories.club_repo import ClubRepository
from app.repositories.event_repo import EventRepository
from app.schemas.club import ClubSummary
from app.schemas.event import (
    ClubEventCreate,
    ClubEventRead,
    ClubEventUpdate,
    EventCreate,
    EventRead,
    EventUpdate,
)
from app.services.guestlist import scanned_guests, summarize


def start_of_today() -> datetime:
    """Local midnight; `upcoming` includes events later the same day."""
    return datetime.combine(datetime.now().date(), time.min)


class EventService:
    """
    Business logic for events.

    Responsibilities:
      - list filters (genre / upcoming / featured)
      - guestlist annotation of every event returned
      - keeping Event.club in sync with the owning club
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: EventRepository, club_repo: ClubRepository):
        self.repo = repo
        self.club_repo = club_repo

    # ----- Helpers -----

    def _get_club(self, session: Session, club_id: uuid.UUID) -> Club:
        club = self.club_repo.get_by_id(session, club_id)
        if not club:
            raise NotFound("Club not found")
        return club

    def annotate(
        self,
        session: Session,
        events: list[Event],
        for_club: bool = False,
    ) -> list[EventRead]:
        """
        Attach total_guests / spots_remaining / club_ref to each event.
        The club portal view (`for_club`) also carries scanned_count.

        Bookings are fetched for the whole page in one query and
        summed per event on every call.
        """
        bookings_by_event: dict[uuid.UUID, list[Booking]] = defaultdict(list)
        for booking in self.repo.list_bookings_for_events(session, [e.id for e in events]):
            bookings_by_event[booking.event_id].append(booking)

        clubs = {
            c.id: ClubSummary.model_validate(c)
            for c in self.repo.get_clubs(session, {e.club_id for e in events})
        }

        result: list[EventRead] = []
        for event in events:
            bookings = bookings_by_event[event.id]
            summary = summarize(event, bookings)
            update = {
                "club_ref": clubs.get(event.club_id),
                "booking_count": len(bookings),
                "total_guests": summary.total_guests,
                "spots_remaining": summary.spots_remaining,
            }
            if for_club:
                update["scanned_count"] = scanned_guests(bookings)
                result.append(ClubEventRead.model_validate(event, update=update))
            else:
                result.append(EventRead.model_validate(event, update=update))
        return result

    # ----- Events -----

    def list_events(
        self,
        session: Session,
        genre: str | None = None,
        upcoming: bool = False,
        featured: bool = False,
    ) -> list[EventRead]:
        """
        Public listing. Filters compose with AND:
          - genre: case-insensitive; None / "" / "all" means no filter
          - upcoming: date >= start of the current local day
          - featured: only featured events
        """
        if genre is not None and genre.strip().lower() in ("", "all"):
            genre = None

        events = self.repo.list_events(
            session,
            genre=genre.strip() if genre else None,
            date_from=start_of_today() if upcoming else None,
            featured=True if featured else None,
        )
        return self.annotate(session, events)

    def list_for_club(
        self,
        session: Session,
        club_id: uuid.UUID,
        upcoming: bool = False,
        for_club: bool = False,
    ) -> list[EventRead]:
        events = self.repo.list_events(
            session,
            club_id=club_id,
            date_from=start_of_today() if upcoming else None,
        )
        return self.annotate(session, events, for_club=for_club)

    def get_event(self, session: Session, event_id: uuid.UUID) -> Event:
        event = self.repo.get_by_id(session, event_id)
        if not event:
            raise NotFound("Event not found")
        return event

    def read_event(self, session: Session, event_id: uuid.UUID) -> EventRead:
        return self.annotate(session, [self.get_event(session, event_id)])[0]

    def create_event(self, session: Session, payload: EventCreate) -> EventRead:
        """
        Create an event owned by `payload.club_id`.

        Raises:
            NotFound: the club does not exist.
        """
        club = self._get_club(session, payload.club_id)
        event = Event(**payload.model_dump(), club=club.name)
        event = self.repo.create(session, event)
        return self.annotate(session, [event])[0]

    def update_event(
        self,
        session: Session,
        event_id: uuid.UUID,
        payload: EventUpdate,
    ) -> EventRead:
        """
        Partial update: only fields present in the body are applied.

        Moving the event to another club re-derives its display name.
        """
        event = self.get_event(session, event_id)
        changes = payload.model_dump(exclude_unset=True)

        if "club_id" in changes and changes["club_id"] != event.club_id:
            event.club = self._get_club(session, changes["club_id"]).name

        for field, value in changes.items():
            setattr(event, field, value)

        event = self.repo.update(session, event)
        return self.annotate(session, [event])[0]

    def delete_event(self, session: Session, event_id: uuid.UUID) -> None:
        """Delete an event and its bookings."""
        event = self.get_event(session, event_id)
        self.repo.delete(session, event)

    # ----- Club portal -----

    def create_event_for_club(
        self,
        session: Session,
        club: Club,
        payload: ClubEventCreate,
    ) -> EventRead:
        """Create an event owned by the authenticated club."""
        event = Event(**payload.model_dump(), club_id=club.id, club=club.name)
        event = self.repo.create(session, event)
        return self.annotate(session, [event], for_club=True)[0]

    def update_club_event(
        self,
        session: Session,
        club: Club,
        event_id: uuid.UUID,
        payload: ClubEventUpdate,
    ) -> EventRead:
        """
        Partial update of one of the club's own events.

        Another club's event is reported as missing.
        """
        event = self.repo.get_by_id(session, event_id)
        if not event or event.club_id != club.id:
            raise NotFound("Event not found")

        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(event, field, value)
        event.club = club.name

        event = self.repo.update(session, event)
        return self.annotate(session, [event], for_club=True)[0]
