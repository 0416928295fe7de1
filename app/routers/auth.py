# app/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import Principal, require_auth
from app.core.security import get_token_service
from app.database import get_session
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    PhoneAuthRequest,
    RegisterRequest,
    UserRead,
)
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = UserService(repo, get_token_service())


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_session),
):
    """
    Create an email/password account and return a session token.

    Errors:
      - 400 if the email is already registered or the payload is invalid.
    """
    return service.register(session, payload)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange email/password for a session token.

    Errors:
      - 401 "Invalid credentials" (never reveals whether the email exists).
    """
    return service.login(session, payload)


@router.post("/phone-auth", response_model=AuthResponse)
def phone_auth(
    payload: PhoneAuthRequest,
    session: Session = Depends(get_session),
):
    """
    Sign in with a phone number already verified by the mobile app's
    identity provider. Creates the account on first use.
    """
    return service.phone_auth(session, payload)


@router.get("/me", response_model=UserRead)
def read_me(
    session: Session = Depends(get_session),
    principal: Principal = Depends(require_auth),
):
    """
    Return the authenticated user's account.

    Auth:
      - Requires a valid session token.
    """
    return service.get_me(session, principal.user_id)
