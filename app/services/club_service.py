# app/services/club_service.py
import logging
import re
import secrets
import string
import uuid

from sqlmodel import Session

from app.core.errors import NotFound, Unauthenticated
from app.core.security import TokenService, hash_password, verify_password
from app.models.club import Club
from app.repositories.club_repo import ClubRepository
from app.repositories.event_repo import EventRepository
from app.schemas.club import ClubCreate, ClubCredentials, ClubListItem, ClubRead, ClubUpdate
from app.schemas.event import ClubDetail
from app.schemas.scanner import ClubAuthResponse, ClubLoginRequest
from app.services.event_service import EventService

logger = logging.getLogger(__name__)

BASE36 = string.digits + string.ascii_lowercase


class ClubService:
    """
    Business logic for clubs.

    Responsibilities:
      - CRUD with partial updates
      - propagating renames onto Event.club
      - club-portal credentials (generation + login)
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(
        self,
        repo: ClubRepository,
        event_repo: EventRepository,
        events: EventService,
        tokens: TokenService,
        email_domain: str,
    ):
        self.repo = repo
        self.event_repo = event_repo
        self.events = events
        self.tokens = tokens
        self.email_domain = email_domain

    # ----- Helpers -----

    @staticmethod
    def _email_slug(name: str) -> str:
        """Lowercase, keep only [a-z0-9]."""
        return re.sub(r"[^a-z0-9]", "", name.lower())

    def _ensure_unique_email(self, session: Session, club: Club, slug: str) -> str:
        """
        Club emails are unique; append 2, 3, ... when another club
        already owns the derived address.
        """
        email = f"{slug}@{self.email_domain}"
        i = 2
        while True:
            owner = self.repo.get_by_email(session, email)
            if owner is None or owner.id == club.id:
                return email
            email = f"{slug}{i}@{self.email_domain}"
            i += 1

    @staticmethod
    def _random_password() -> str:
        """Two random base-36 fragments (8 + 4 chars), the second upper-cased."""
        head = "".join(secrets.choice(BASE36) for _ in range(8))
        tail = "".join(secrets.choice(BASE36) for _ in range(4))
        return head + tail.upper()

    # ----- Clubs -----

    def list_clubs(self, session: Session) -> list[ClubListItem]:
        return [
            ClubListItem.model_validate(club, update={"event_count": count})
            for club, count in self.repo.list_with_event_counts(session)
        ]

    def get_club(self, session: Session, club_id: uuid.UUID) -> Club:
        club = self.repo.get_by_id(session, club_id)
        if not club:
            raise NotFound("Club not found")
        return club

    def get_club_detail(self, session: Session, club_id: uuid.UUID) -> ClubDetail:
        """Club with its upcoming events, annotated with guestlist numbers."""
        club = self.get_club(session, club_id)
        events = self.events.list_for_club(session, club.id, upcoming=True)
        return ClubDetail.model_validate(club, update={"events": events})

    def create_club(self, session: Session, payload: ClubCreate) -> Club:
        return self.repo.create(session, Club(**payload.model_dump()))

    def update_club(
        self,
        session: Session,
        club_id: uuid.UUID,
        payload: ClubUpdate,
    ) -> Club:
        """
        Partial update of a club.

        - A new name is copied onto every event of the club.
        """
        club = self.get_club(session, club_id)
        changes = payload.model_dump(exclude_unset=True)

        if "name" in changes and changes["name"] != club.name:
            self.event_repo.rename_club(session, club.id, changes["name"])

        for field, value in changes.items():
            setattr(club, field, value)

        return self.repo.update(session, club)

    def delete_club(self, session: Session, club_id: uuid.UUID) -> None:
        """
        Delete a club.

        Events are not removed here; if the club still has events the
        foreign key rejects the delete and the error surfaces as a 500.
        """
        club = self.get_club(session, club_id)
        self.repo.delete(session, club)

    # ----- Club portal -----

    def generate_credentials(self, session: Session, club_id: uuid.UUID) -> ClubCredentials:
        """
        Issue (or re-issue) portal credentials for a club.

        Only the bcrypt hash is stored; the plaintext password is
        returned once and cannot be recovered afterwards.
        """
        club = self.get_club(session, club_id)

        slug = self._email_slug(club.name) or f"club{club.id.hex[:8]}"
        email = self._ensure_unique_email(session, club, slug)
        password = self._random_password()

        club.email = email
        club.password_hash = hash_password(password)
        self.repo.update(session, club)

        logger.info("Generated portal credentials for club %s", club.id)
        return ClubCredentials(email=email, password=password)

    def login_portal(self, session: Session, payload: ClubLoginRequest) -> ClubAuthResponse:
        club = self.repo.get_by_email(session, payload.email.lower())
        if club is None or not verify_password(payload.password, club.password_hash):
            raise Unauthenticated("Invalid credentials")
        return ClubAuthResponse(
            club=ClubRead.model_validate(club),
            token=self.tokens.issue_club(club.id),
        )
