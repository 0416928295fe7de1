"""
Shared scaffolding for API tests.

Each test gets a fresh in-memory SQLite database and an in-memory
storage client, wired in through FastAPI dependency overrides.
"""

import unittest
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.security import get_token_service
from app.core.storage_utils import get_storage
from app.database import enable_sqlite_foreign_keys, get_session
from app.main import app
from app.models.user import User


@dataclass
class InMemoryStorage:
    """Test double for object storage."""

    base_url: str = "https://media.example.test"
    objects: dict = field(default_factory=dict)

    def upload(self, key: str, file_bytes: bytes, content_type: str) -> str:
        self.objects[key] = (content_type, file_bytes)
        return f"{self.base_url}/{key}"

    def check_bucket(self) -> bool:
        return True


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_foreign_keys(self.engine)
        SQLModel.metadata.create_all(self.engine)

        def override_session():
            with Session(self.engine) as session:
                yield session

        self.storage = InMemoryStorage()
        app.dependency_overrides[get_session] = override_session
        app.dependency_overrides[get_storage] = lambda: self.storage
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        SQLModel.metadata.drop_all(self.engine)
        self.engine.dispose()

    # ----- Auth helpers -----

    def create_user(self, name: str = "Guest User", is_admin: bool = False) -> User:
        with Session(self.engine) as session:
            user = User(
                email=f"{uuid.uuid4().hex[:8]}@example.com",
                name=name,
                is_admin=is_admin,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    def auth_headers(self, user_id: uuid.UUID, is_admin: bool = False) -> dict[str, str]:
        token = get_token_service().issue(user_id, is_admin)
        return {"Authorization": f"Bearer {token}"}

    def admin_headers(self) -> dict[str, str]:
        return self.auth_headers(self.create_user("Admin", is_admin=True).id, is_admin=True)

    def club_headers(self, club_id) -> dict[str, str]:
        token = get_token_service().issue_club(uuid.UUID(str(club_id)))
        return {"Authorization": f"Bearer {token}"}

    # ----- Resource helpers -----

    def create_club(self, **overrides) -> dict:
        payload = {
            "name": "Kitty Su",
            "location": "Aerocity",
            "address": "The Lalit, Barakhamba Avenue",
            "map_url": "https://maps.example.com/kitty-su",
            "image_url": "https://media.example.test/kitty.jpg",
        }
        payload.update(overrides)
        response = self.client.post("/api/clubs", json=payload, headers=self.admin_headers())
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def event_payload(self, club_id: str, **overrides) -> dict:
        payload = {
            "title": "Deep House Sundays",
            "club_id": club_id,
            "location": "Aerocity",
            "description": "Open-air deep house until sunrise.",
            "genre": "house",
            "image_url": "https://media.example.test/flyer.jpg",
            "date": (datetime.now() + timedelta(days=3)).replace(microsecond=0).isoformat(),
            "start_time": "22:00",
            "end_time": "04:00",
        }
        payload.update(overrides)
        return payload

    def create_event(self, club_id: str, **overrides) -> dict:
        response = self.client.post(
            "/api/events",
            json=self.event_payload(club_id, **overrides),
            headers=self.admin_headers(),
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()
