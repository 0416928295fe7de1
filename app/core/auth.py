# app/core/auth.py
import uuid
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from app.core.errors import Forbidden, Unauthenticated
from app.core.security import InvalidToken, TokenService, get_token_service
from app.database import get_session
from app.models.club import Club

# HTTP Bearer scheme:
# - auto_error=False => a missing or non-Bearer Authorization header yields
#   None instead of FastAPI's own error, so every failure below collapses
#   into the same 401.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Identity attached to an authenticated request."""

    user_id: uuid.UUID
    is_admin: bool


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """
    Resolve the caller from `Authorization: Bearer <token>`.

    Authorization is stateless: the principal comes entirely from the
    signed token, no DB lookup is made.

    Raises:
        Unauthenticated(401): header missing, malformed, or token
        fails verification. The caller is not told which.
    """
    if credentials is None:
        raise Unauthenticated()

    try:
        claims = tokens.verify(credentials.credentials)
    except InvalidToken:
        raise Unauthenticated()

    return Principal(user_id=claims.user_id, is_admin=claims.is_admin)


def require_auth(principal: Principal = Depends(get_current_principal)) -> Principal:
    """
    Enforce authentication.

    Returns:
        The authenticated Principal.
    """
    return principal


def require_admin(principal: Principal = Depends(require_auth)) -> Principal:
    """
    Enforce admin role. Runs after require_auth.

    Raises:
        Forbidden(403): if the token says isAdmin=false.
    """
    if not principal.is_admin:
        raise Forbidden("Admin access required")
    return principal


def require_club(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    session: Session = Depends(get_session),
) -> Club:
    """
    Resolve the club behind a club-portal token.

    Unlike user tokens the club row is loaded, so a deleted club's
    outstanding tokens stop working.

    Raises:
        Unauthenticated(401): missing/invalid token, user token, or
        the club no longer exists.
    """
    if credentials is None:
        raise Unauthenticated()

    try:
        club_id = tokens.verify_club(credentials.credentials)
    except InvalidToken:
        raise Unauthenticated()

    club = session.get(Club, club_id)
    if club is None:
        raise Unauthenticated()
    return club
