# app/repositories/club_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.club import Club
from app.models.event import Event


class ClubRepository:
    """
    Data access layer for Club.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, club_id: uuid.UUID) -> Club | None:
        return session.get(Club, club_id)

    def get_by_email(self, session: Session, email: str) -> Club | None:
        stmt = select(Club).where(Club.email == email)
        return session.exec(stmt).first()

    def list_with_event_counts(self, session: Session) -> list[tuple[Club, int]]:
        """All clubs ordered by name, each paired with its number of events."""
        stmt = (
            select(Club, func.count(Event.id))
            .join(Event, Event.club_id == Club.id, isouter=True)
            .group_by(Club.id)
            .order_by(Club.name)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, club: Club) -> Club:
        session.add(club)
        session.commit()
        session.refresh(club)
        return club

    def update(self, session: Session, club: Club) -> Club:
        session.add(club)
        session.commit()
        session.refresh(club)
        return club

    def delete(self, session: Session, club: Club) -> None:
        session.delete(club)
        session.commit()
