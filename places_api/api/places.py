"""Place API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from places_api.api.dependencies import AuthContext, get_auth_context, get_place_service
from places_api.schemas.place import (
    MessageResponse,
    PlaceCreate,
    PlaceEnvelope,
    PlaceResponse,
    PlacesEnvelope,
    PlaceUpdate,
)
from places_api.services.place_service import PlaceService

router = APIRouter(prefix="/api/places", tags=["places"])


@router.get("/user/{user_id}", response_model=PlacesEnvelope)
def get_places_by_user_id(
    user_id: int,
    places: Annotated[PlaceService, Depends(get_place_service)],
):
    """Get all places created by a user."""
    return PlacesEnvelope(
        places=[PlaceResponse.model_validate(p) for p in places.get_places_by_user_id(user_id)]
    )


@router.get("/{place_id}", response_model=PlaceEnvelope)
def get_place(
    place_id: int,
    places: Annotated[PlaceService, Depends(get_place_service)],
):
    """Get a specific place."""
    return PlaceEnvelope(place=PlaceResponse.model_validate(places.get_place_by_id(place_id)))


@router.post("", response_model=PlaceEnvelope, status_code=status.HTTP_201_CREATED)
async def create_place(
    place_data: PlaceCreate,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    places: Annotated[PlaceService, Depends(get_place_service)],
):
    """Create a new place owned by the current user.

    The address is geocoded before anything is written.
    """
    place = await places.create_place(place_data, auth.user_id)
    return PlaceEnvelope(place=PlaceResponse.model_validate(place))


@router.patch("/{place_id}", response_model=PlaceEnvelope)
def update_place(
    place_id: int,
    place_data: PlaceUpdate,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    places: Annotated[PlaceService, Depends(get_place_service)],
):
    """Update a place's title and description (creator only)."""
    place = places.update_place(place_id, place_data, auth.user_id)
    return PlaceEnvelope(place=PlaceResponse.model_validate(place))


@router.delete("/{place_id}", response_model=MessageResponse)
def delete_place(
    place_id: int,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    places: Annotated[PlaceService, Depends(get_place_service)],
):
    """Delete a place (creator only)."""
    places.delete_place(place_id, auth.user_id)
    return MessageResponse(message="Deleted place.")
