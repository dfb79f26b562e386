"""Pydantic schemas for API requests and responses."""

from places_api.schemas.auth import AuthResponse, UserLogin, UserSignup
from places_api.schemas.place import (
    Location,
    MessageResponse,
    PlaceCreate,
    PlaceEnvelope,
    PlaceResponse,
    PlacesEnvelope,
    PlaceUpdate,
)
from places_api.schemas.user import UserResponse, UsersEnvelope

__all__ = [
    "UserSignup",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "UsersEnvelope",
    "Location",
    "PlaceCreate",
    "PlaceUpdate",
    "PlaceResponse",
    "PlaceEnvelope",
    "PlacesEnvelope",
    "MessageResponse",
]
