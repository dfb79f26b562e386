"""Place schemas."""

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    lat: float
    lng: float


class PlaceCreate(BaseModel):
    """Create a new place."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=5)
    address: str = Field(..., min_length=1, max_length=1024)
    image: str = Field(..., min_length=1, max_length=1024)


class PlaceUpdate(BaseModel):
    """Update a place (creator only)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=5)


class PlaceResponse(BaseModel):
    """Place response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    image: str
    address: str
    location: Location
    creator: int = Field(..., validation_alias="creator_id")


class PlaceEnvelope(BaseModel):
    place: PlaceResponse


class PlacesEnvelope(BaseModel):
    places: list[PlaceResponse]


class MessageResponse(BaseModel):
    message: str
