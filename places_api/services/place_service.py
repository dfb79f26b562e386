"""Place lifecycle: reads, and create/update/delete with ownership checks."""

import logging

from places_api.exceptions import (
    DeletionFailed,
    Forbidden,
    PlaceCreationFailed,
    PlaceNotFound,
    PlacesForUserNotFound,
    StoreUnavailable,
    UpdateFailed,
    UserNotFound,
)
from places_api.models.place import Place
from places_api.models.user import User
from places_api.schemas.place import PlaceCreate, PlaceUpdate
from places_api.services.geocoding import GeocodingService
from places_api.services.images import ImageStore
from places_api.services.store import RecordStore, Transaction

logger = logging.getLogger(__name__)


class PlaceService:
    """Service for place-related operations.

    Creating and deleting a place touches two records, the place and its
    creator's place set. Both writes go through one store transaction so a
    reader never sees a place without its owner link or the reverse.
    """

    def __init__(self, store: RecordStore, geocoder: GeocodingService, images: ImageStore):
        self.store = store
        self.geocoder = geocoder
        self.images = images

    def get_place_by_id(self, place_id: int) -> Place:
        place = self.store.find_by_id(Place, place_id)
        if place is None:
            raise PlaceNotFound(place_id)
        return place

    def get_places_by_user_id(self, user_id: int) -> list[Place]:
        places = self.store.find_many(Place, creator_id=user_id)
        if not places:
            raise PlacesForUserNotFound(user_id)
        return places

    async def create_place(self, data: PlaceCreate, user_id: int) -> Place:
        """Create a place owned by ``user_id``.

        Input shape is validated by the request schema before this runs.
        Geocoding failures propagate unchanged.
        """
        coordinates = await self.geocoder.get_coordinates(data.address)

        try:
            user = self.store.find_by_id(User, user_id)
        except StoreUnavailable as e:
            raise PlaceCreationFailed() from e
        if user is None:
            raise UserNotFound(user_id)

        place = Place(
            title=data.title,
            description=data.description,
            image=data.image,
            address=data.address,
            lat=coordinates.lat,
            lng=coordinates.lng,
            creator_id=user.id,
        )

        def add_to_creator(txn: Transaction) -> None:
            self.store.save(place, txn)
            user.places.add(place)
            self.store.save(user, txn)

        try:
            self.store.with_transaction(add_to_creator)
        except StoreUnavailable as e:
            raise PlaceCreationFailed() from e

        logger.info(f"User {user_id} created place {place.id}")
        return place

    def update_place(self, place_id: int, data: PlaceUpdate, user_id: int) -> Place:
        place = self.get_place_by_id(place_id)

        if place.creator_id != user_id:
            logger.warning(f"User {user_id} tried to edit place {place_id} they did not create")
            raise Forbidden("You are not allowed to edit this place.")

        place.title = data.title
        place.description = data.description
        try:
            self.store.save(place)
        except StoreUnavailable as e:
            raise UpdateFailed() from e

        logger.info(f"User {user_id} updated place {place_id}")
        return place

    def delete_place(self, place_id: int, user_id: int) -> None:
        place = self.get_place_by_id(place_id)
        creator = place.creator

        if creator is None or creator.id != user_id:
            logger.warning(f"User {user_id} tried to delete place {place_id} they did not create")
            raise Forbidden("You are not allowed to delete this place.")

        image_ref = place.image

        def remove_from_creator(txn: Transaction) -> None:
            creator.places.discard(place)
            self.store.remove(place, txn)
            self.store.save(creator, txn)

        try:
            self.store.with_transaction(remove_from_creator)
        except StoreUnavailable as e:
            raise DeletionFailed() from e

        logger.info(f"User {user_id} deleted place {place_id}")
        self._release_unused_image(image_ref)

    def _release_unused_image(self, image_ref: str) -> None:
        """Release the image unless another place or a user avatar still uses the file."""
        path = self.images.resolve(image_ref)
        if path is None:
            return

        # References may spell the same file differently, so compare resolved paths
        try:
            candidates = self.store.find_matching(
                Place, Place.image.endswith(path.name)
            ) + self.store.find_matching(User, User.image.endswith(path.name))
        except StoreUnavailable:
            logger.warning(f"Could not check whether image '{image_ref}' is in use, keeping it")
            return

        if any(self.images.resolve(record.image) == path for record in candidates):
            logger.info(f"Image '{image_ref}' is still referenced, keeping it")
            return
        self.images.release(image_ref)
