# app/routers/scanner.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_club
from app.core.config import get_settings
from app.core.security import get_token_service
from app.database import get_session
from app.models.club import Club
from app.repositories.booking_repo import BookingRepository
from app.repositories.club_repo import ClubRepository
from app.repositories.event_repo import EventRepository
from app.repositories.user_repo import UserRepository
from app.schemas.booking import GuestlistEntry
from app.schemas.club import ClubRead
from app.schemas.event import ClubEventCreate, ClubEventRead, ClubEventUpdate
from app.schemas.scanner import ClubAuthResponse, ClubLoginRequest, ScanRequest, ScanResult
from app.services.booking_service import BookingService
from app.services.club_service import ClubService
from app.services.event_service import EventService

router = APIRouter(prefix="/scanner", tags=["Club portal"])

club_repo = ClubRepository()
event_repo = EventRepository()
event_service = EventService(event_repo, club_repo)
booking_service = BookingService(BookingRepository(), event_repo, UserRepository())
service = ClubService(
    club_repo,
    event_repo,
    event_service,
    get_token_service(),
    get_settings().CLUB_EMAIL_DOMAIN,
)


@router.post("/login", response_model=ClubAuthResponse)
def club_login(
    payload: ClubLoginRequest,
    session: Session = Depends(get_session),
):
    """
    Club-portal login with credentials generated by an admin.
    """
    return service.login_portal(session, payload)


@router.get("/me", response_model=ClubRead)
def read_club_me(club: Club = Depends(require_club)):
    """
    The club behind the portal token.
    """
    return club


# -------- Events --------


@router.get("/events", response_model=list[ClubEventRead])
def list_club_events(
    club: Club = Depends(require_club),
    session: Session = Depends(get_session),
):
    """
    The club's own events with live guestlist and check-in numbers.
    """
    return event_service.list_for_club(session, club.id, for_club=True)


@router.post(
    "/events",
    response_model=ClubEventRead,
    status_code=status.HTTP_201_CREATED,
)
def create_club_event(
    payload: ClubEventCreate,
    club: Club = Depends(require_club),
    session: Session = Depends(get_session),
):
    """
    Create an event owned by the calling club.
    """
    return event_service.create_event_for_club(session, club, payload)


@router.put("/events/{event_id}", response_model=ClubEventRead)
def update_club_event(
    event_id: uuid.UUID,
    payload: ClubEventUpdate,
    club: Club = Depends(require_club),
    session: Session = Depends(get_session),
):
    """
    Update one of the calling club's events (404 for other clubs' events).
    """
    return event_service.update_club_event(session, club, event_id, payload)


@router.get("/events/{event_id}/guestlist", response_model=list[GuestlistEntry])
def read_club_guestlist(
    event_id: uuid.UUID,
    club: Club = Depends(require_club),
    session: Session = Depends(get_session),
):
    """
    Door list for one of the calling club's events, oldest booking first.
    """
    return booking_service.club_guestlist(session, club, event_id)


# -------- Check-in --------


@router.post("/scan", response_model=ScanResult)
def scan_booking(
    payload: ScanRequest,
    club: Club = Depends(require_club),
    session: Session = Depends(get_session),
):
    """
    Check a guest in from their QR code.

    Errors:
      - 400 missing code / cancelled booking / already scanned
      - 403 booking belongs to another club's event
      - 404 unknown booking
    """
    return booking_service.scan(session, club, payload)
