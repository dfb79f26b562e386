"""Release of locally stored place images."""

import logging
from pathlib import Path

from places_api.config import get_settings

logger = logging.getLogger(__name__)


class ImageStore:
    """Local image files referenced by places."""

    def __init__(self, uploads_dir: str | Path | None = None):
        self.uploads_dir = Path(uploads_dir or get_settings().uploads_dir).resolve()

    def resolve(self, image_ref: str) -> Path | None:
        """Map an image reference to a file inside the uploads directory.

        Remote URLs and paths outside the uploads directory map to None.
        """
        if not image_ref or "://" in image_ref:
            return None
        path = Path(image_ref)
        candidates = [path] if path.is_absolute() else [Path.cwd() / path, self.uploads_dir / path]
        for candidate in candidates:
            try:
                candidate = candidate.resolve()
            except (OSError, ValueError):
                return None
            if candidate.is_relative_to(self.uploads_dir):
                return candidate
        return None

    def release(self, image_ref: str) -> bool:
        """Best-effort delete of the image file; failures are only logged."""
        try:
            path = self.resolve(image_ref)
            if path is None:
                logger.debug(f"Image '{image_ref}' is not a local upload, nothing to release")
                return False
            path.unlink()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not release image '{image_ref}': {e}")
            return False
        logger.info(f"Released image {path}")
        return True


def get_image_store() -> ImageStore:
    """Get an image store instance."""
    return ImageStore()
