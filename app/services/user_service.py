# app/services/user_service.py
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.errors import Conflict, NotFound, Unauthenticated
from app.core.security import TokenService, hash_password, verify_password
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    PhoneAuthRequest,
    RegisterRequest,
    UserRead,
)

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for accounts and sessions.

    Responsibilities:
      - email/password registration and login
      - phone-auth find-or-create (phone already verified upstream)
      - issuing session tokens
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: UserRepository, tokens: TokenService):
        self.repo = repo
        self.tokens = tokens

    def _session_for(self, user: User) -> AuthResponse:
        return AuthResponse(
            user=UserRead.model_validate(user),
            token=self.tokens.issue(user.id, user.is_admin),
        )

    # ----- Email / password -----

    def register(self, session: Session, payload: RegisterRequest) -> AuthResponse:
        """
        Create an account and sign it in.

        Raises:
            Conflict: email (or phone) already registered.
        """
        email = payload.email.lower()
        if self.repo.get_by_email(session, email) is not None:
            raise Conflict("Email already registered")

        user = User(
            email=email,
            password_hash=hash_password(payload.password),
            name=payload.name,
            phone=payload.phone,
        )
        try:
            user = self.repo.create(session, user)
        except IntegrityError:
            # Lost a race on email, or the phone belongs to another account
            session.rollback()
            raise Conflict("Email or phone already registered")

        logger.info("Registered user %s", user.id)
        return self._session_for(user)

    def login(self, session: Session, payload: LoginRequest) -> AuthResponse:
        """
        Raises:
            Unauthenticated: unknown email, wrong password, or an account
            without a password. All three look the same to the caller.
        """
        user = self.repo.get_by_email(session, payload.email.lower())
        if user is None or not verify_password(payload.password, user.password_hash):
            raise Unauthenticated("Invalid credentials")
        return self._session_for(user)

    # ----- Phone auth -----

    def phone_auth(self, session: Session, payload: PhoneAuthRequest) -> AuthResponse:
        """
        Find-or-create a user by phone number.

        An existing user's name is updated when a different one is sent.
        """
        user = self.repo.get_by_phone(session, payload.phone)

        if user is None:
            try:
                user = self.repo.create(session, User(phone=payload.phone, name=payload.name))
                logger.info("Created phone user %s", user.id)
                return self._session_for(user)
            except IntegrityError:
                # A concurrent request created the same phone first
                session.rollback()
                user = self.repo.get_by_phone(session, payload.phone)
                if user is None:
                    raise Conflict("Phone already registered")

        if user.name != payload.name:
            user.name = payload.name
            user = self.repo.update(session, user)

        return self._session_for(user)

    # ----- Self profile -----

    def get_me(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Load the caller's account.

        Raises:
            NotFound: the token is valid but the user row is gone.
        """
        user = self.repo.get_by_id(session, user_id)
        if user is None:
            raise NotFound("User not found")
        return user
