# app/routers/clubs.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.config import get_settings
from app.core.security import get_token_service
from app.database import get_session
from app.repositories.club_repo import ClubRepository
from app.repositories.event_repo import EventRepository
from app.schemas.club import (
    ClubCreate,
    ClubCredentials,
    ClubListItem,
    ClubRead,
    ClubUpdate,
)
from app.schemas.event import ClubDetail, EventRead
from app.services.club_service import ClubService
from app.services.event_service import EventService

router = APIRouter(prefix="/clubs", tags=["Clubs"])

repo = ClubRepository()
event_repo = EventRepository()
event_service = EventService(event_repo, repo)
service = ClubService(
    repo,
    event_repo,
    event_service,
    get_token_service(),
    get_settings().CLUB_EMAIL_DOMAIN,
)


# -------- Public endpoints --------


@router.get("", response_model=list[ClubListItem])
def list_clubs(session: Session = Depends(get_session)):
    """
    List all clubs, ordered by name, with their event counts.
    """
    return service.list_clubs(session)


@router.get("/{club_id}", response_model=ClubDetail)
def get_club(
    club_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a club with its upcoming events.
    """
    return service.get_club_detail(session, club_id)


@router.get("/{club_id}/events", response_model=list[EventRead])
def list_club_events(
    club_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    All events of a club (past and upcoming), ordered by date.
    """
    service.get_club(session, club_id)
    return event_service.list_for_club(session, club_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ClubRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_club(
    payload: ClubCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new club (admin only).
    """
    return service.create_club(session, payload)


@router.put(
    "/{club_id}",
    response_model=ClubRead,
    dependencies=[Depends(require_admin)],
)
def update_club(
    club_id: uuid.UUID,
    payload: ClubUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing club (admin only).
    """
    return service.update_club(session, club_id, payload)


@router.delete(
    "/{club_id}",
    dependencies=[Depends(require_admin)],
)
def delete_club(
    club_id: uuid.UUID,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    """
    Delete a club (admin only).
    """
    service.delete_club(session, club_id)
    return {"message": "Club deleted successfully"}


@router.post(
    "/{club_id}/credentials",
    response_model=ClubCredentials,
    dependencies=[Depends(require_admin)],
    summary="Generate club-portal login credentials",
)
def generate_credentials(
    club_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Generate (or regenerate) portal credentials for a club (admin only).

    - The plaintext password is only returned by this call.
    """
    return service.generate_credentials(session, club_id)
