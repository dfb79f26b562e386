"""User schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class UserResponse(BaseModel):
    """Public user information (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    image: str
    places: list[int] = []

    @field_validator("places", mode="before")
    @classmethod
    def place_ids(cls, value: Any) -> list[int]:
        ids = [getattr(place, "id", place) for place in value or []]
        return sorted(ids)


class UsersEnvelope(BaseModel):
    users: list[UserResponse]
