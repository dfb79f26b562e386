"""SQLAlchemy models."""

from places_api.models.place import Place
from places_api.models.user import User

__all__ = [
    "User",
    "Place",
]
