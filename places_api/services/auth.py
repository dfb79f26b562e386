"""Credential service: password hashing and JWT handling."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from places_api.config import get_settings
from places_api.exceptions import CryptoFailure, InvalidToken, SigningFailure

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


@dataclass(frozen=True)
class TokenPayload:
    """Identity carried by a verified access token."""

    user_id: int
    email: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    A mismatch returns False; a hash the primitive cannot handle raises
    CryptoFailure.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification failed: {e}")
        raise CryptoFailure("Could not verify password.") from e


def get_password_hash(password: str) -> str:
    """Hash a password."""
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password hashing failed: {e}")
        raise CryptoFailure("Could not hash password.") from e


def create_access_token(user_id: int, email: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    if not settings.jwt_secret:
        raise SigningFailure("No signing secret configured.")

    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.jwt_expiration_minutes)
    )
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    try:
        return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    except (JWTError, TypeError, ValueError) as e:
        logger.error(f"Token signing failed: {e}")
        raise SigningFailure() from e


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a JWT token.

    Raises InvalidToken on a bad signature, an expired token, or a payload
    without a numeric subject and an email.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidToken() from e

    subject = payload.get("sub")
    email = payload.get("email")
    if subject is None or not email:
        raise InvalidToken()
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as e:
        raise InvalidToken() from e

    return TokenPayload(user_id=user_id, email=email)
