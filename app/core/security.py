# app/core/security.py
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any

import bcrypt
from jose import jwt, JWTError

from app.core.config import Settings, get_settings

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72

CLUB_TOKEN_TYPE = "club"


class InvalidToken(Exception):
    """Raised when a token fails signature, payload or expiry checks."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: uuid.UUID
    is_admin: bool


class TokenService:
    """
    Issues and verifies signed session tokens (HS256 JWT).

    User tokens carry ``{userId, isAdmin, exp}``; club-portal tokens
    carry ``{clubId, type: "club", exp}``. Nothing is stored server-side:
    a token is valid until it expires, and rotating the secret
    invalidates every outstanding session.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_days: int = 7):
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(days=expire_days)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALG,
            expire_days=settings.ACCESS_TOKEN_EXPIRE_DAYS,
        )

    def _encode(self, claims: dict[str, Any]) -> str:
        payload = {**claims, "exp": datetime.now(timezone.utc) + self.lifetime}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidToken(str(exc)) from exc

    # ----- User sessions -----

    def issue(self, user_id: uuid.UUID, is_admin: bool) -> str:
        return self._encode({"userId": str(user_id), "isAdmin": bool(is_admin)})

    def verify(self, token: str) -> TokenClaims:
        """
        Decode a user token.

        Raises:
            InvalidToken: bad signature, expired, or payload is not a
            user token (missing/ill-typed userId or isAdmin).
        """
        payload = self._decode(token)
        if payload.get("type") == CLUB_TOKEN_TYPE:
            raise InvalidToken("club token used as user token")

        user_id = payload.get("userId")
        is_admin = payload.get("isAdmin")
        if not isinstance(user_id, str) or not isinstance(is_admin, bool):
            raise InvalidToken("malformed payload")

        try:
            return TokenClaims(user_id=uuid.UUID(user_id), is_admin=is_admin)
        except ValueError as exc:
            raise InvalidToken("malformed userId") from exc

    # ----- Club portal sessions -----

    def issue_club(self, club_id: uuid.UUID) -> str:
        return self._encode({"clubId": str(club_id), "type": CLUB_TOKEN_TYPE})

    def verify_club(self, token: str) -> uuid.UUID:
        payload = self._decode(token)
        club_id = payload.get("clubId")
        if payload.get("type") != CLUB_TOKEN_TYPE or not isinstance(club_id, str):
            raise InvalidToken("not a club token")

        try:
            return uuid.UUID(club_id)
        except ValueError as exc:
            raise InvalidToken("malformed clubId") from exc


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built from the cached settings."""
    return TokenService.from_settings(get_settings())


# ----- Password hashing -----


def hash_password(password: str) -> str:
    """
    Raises:
        ValueError: the password is longer than bcrypt's 72-byte input.
    """
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password exceeds {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    Accounts without a password (phone-auth users, clubs without
    generated credentials) never match.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
