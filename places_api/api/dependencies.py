"""FastAPI dependencies for authentication, storage and services."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from places_api.database import get_db
from places_api.exceptions import InvalidToken, Unauthorized
from places_api.services.auth import decode_access_token
from places_api.services.geocoding import GeocodingService, get_geocoding_service
from places_api.services.images import ImageStore, get_image_store
from places_api.services.place_service import PlaceService
from places_api.services.store import RecordStore
from places_api.services.user_service import UserService

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Authenticated principal of the current request."""

    user_id: int


def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthContext:
    """Verify the bearer token and return the caller's identity.

    Requests without a valid ``Authorization: Bearer <token>`` header is
    rejected before the route handler runs.
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise Unauthorized()

    try:
        payload = decode_access_token(credentials.credentials)
    except InvalidToken as e:
        raise Unauthorized() from e

    return AuthContext(user_id=payload.user_id)


def get_record_store(db: Annotated[Session, Depends(get_db)]) -> RecordStore:
    """Get a record store bound to the request's session."""
    return RecordStore(db)


def get_place_service(
    store: Annotated[RecordStore, Depends(get_record_store)],
    geocoder: Annotated[GeocodingService, Depends(get_geocoding_service)],
    images: Annotated[ImageStore, Depends(get_image_store)],
) -> PlaceService:
    """Get place service with dependencies."""
    return PlaceService(store, geocoder, images)


def get_user_service(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(store)
