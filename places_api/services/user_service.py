"""User lifecycle: listing, signup and login."""

import logging
from dataclasses import dataclass

from fastapi import status

from places_api.exceptions import (
    CryptoFailure,
    InvalidCredentials,
    LoginFailed,
    LookupFailed,
    SigningFailure,
    SignupFailed,
    StoreConflict,
    StoreUnavailable,
    UserExists,
)
from places_api.models.user import User
from places_api.services.auth import create_access_token, get_password_hash, verify_password
from places_api.services.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user_id: int
    email: str
    token: str


class UserService:
    """Service for user-related operations."""

    def __init__(self, store: RecordStore):
        self.store = store

    def list_users(self) -> list[User]:
        try:
            return self.store.find_many(User)
        except StoreUnavailable as e:
            raise LookupFailed("Fetching users failed, please try again later.") from e

    def get_user_by_email(self, email: str) -> User | None:
        try:
            return self.store.find_one(User, email=email)
        except StoreUnavailable as e:
            raise LookupFailed() from e

    def signup(self, name: str, email: str, password: str, image: str) -> AuthResult:
        """Create a user with an empty place set and issue a token."""
        if self.get_user_by_email(email) is not None:
            logger.info(f"Signup rejected, email already registered: {email}")
            raise UserExists()

        try:
            hashed_password = get_password_hash(password)
        except CryptoFailure as e:
            raise SignupFailed("Could not create user, please try again.") from e

        user = User(name=name, email=email, image=image, password_hash=hashed_password)
        try:
            self.store.save(user)
        except StoreConflict as e:
            # Another signup with the same email committed first
            logger.info(f"Signup rejected, email registered concurrently: {email}")
            raise UserExists() from e
        except StoreUnavailable as e:
            raise SignupFailed() from e

        try:
            token = create_access_token(user.id, user.email)
        except SigningFailure as e:
            raise SignupFailed() from e

        logger.info(f"Signed up user {user.id}")
        return AuthResult(user_id=user.id, email=user.email, token=token)

    def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials and issue a token.

        An unknown email answers 401 and a wrong password 403. Both carry the
        same message so the client cannot tell which check failed.
        """
        user = self.get_user_by_email(email)
        if user is None:
            logger.info("Login failed: unknown email")
            raise InvalidCredentials()

        try:
            is_valid_password = verify_password(password, user.password_hash)
        except CryptoFailure as e:
            raise LoginFailed("Could not log you in, please try again.") from e

        if not is_valid_password:
            logger.info(f"Login failed for user {user.id}: wrong password")
            raise InvalidCredentials(status_code=status.HTTP_403_FORBIDDEN)

        try:
            token = create_access_token(user.id, user.email)
        except SigningFailure as e:
            raise LoginFailed() from e

        logger.info(f"User {user.id} logged in")
        return AuthResult(user_id=user.id, email=user.email, token=token)
