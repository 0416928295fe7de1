# app/routers/events.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.club_repo import ClubRepository
from app.repositories.event_repo import EventRepository
from app.schemas.event import EventCreate, EventRead, EventUpdate
from app.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["Events"])

repo = EventRepository()
club_repo = ClubRepository()
service = EventService(repo, club_repo)


# -------- Public endpoints --------


@router.get("", response_model=list[EventRead])
def list_events(
    session: Session = Depends(get_session),
    genre: str | None = None,
    upcoming: bool = False,
    featured: bool = False,
):
    """
    List events ordered by date.

    - `genre`: case-insensitive match; "all" disables the filter.
    - `upcoming=true`: events from the start of today onwards.
    - `featured=true`: featured events only.

    Each event carries live `total_guests` and `spots_remaining`.
    """
    return service.list_events(
        session, genre=genre, upcoming=upcoming, featured=featured
    )


@router.get("/{event_id}", response_model=EventRead)
def get_event(
    event_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single event by id.
    """
    return service.read_event(session, event_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=EventRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_event(
    payload: EventCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new event (admin only).
    """
    return service.create_event(session, payload)


@router.put(
    "/{event_id}",
    response_model=EventRead,
    dependencies=[Depends(require_admin)],
)
def update_event(
    event_id: uuid.UUID,
    payload: EventUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing event (admin only).
    """
    return service.update_event(session, event_id, payload)


@router.delete(
    "/{event_id}",
    dependencies=[Depends(require_admin)],
)
def delete_event(
    event_id: uuid.UUID,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    """
    Delete an event and its bookings (admin only).
    """
    service.delete_event(session, event_id)
    return {"message": "Event deleted successfully"}
