"""Error taxonomy and the handlers that turn it into API responses.

Every failure raised by the services is a ``PlacesAPIError``. The handlers
registered in ``main.py`` convert them (and FastAPI's own validation and
routing errors) into a uniform ``{"message": ..., "code": ...}`` body, so no
internal exception crosses the HTTP boundary unconverted.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class PlacesAPIError(Exception):
    """Base exception for the places API."""

    message = "An unknown error occurred!"
    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        status_code: int | None = None,
    ):
        self.message = message or self.message
        self.code = code or self.code
        self.status_code = status_code or self.status_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return {"message": self.message, "code": self.code}


# --- Caller input ---


class ValidationFailed(PlacesAPIError):
    message = "Invalid inputs passed, please check your data."
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


# --- Authentication and ownership ---


class Unauthorized(PlacesAPIError):
    """Missing, malformed or unverifiable bearer token."""

    message = "Authentication failed!"
    code = "UNAUTHORIZED"
    status_code = status.HTTP_403_FORBIDDEN


class InvalidToken(Unauthorized):
    code = "INVALID_TOKEN"


class Forbidden(PlacesAPIError):
    """Authenticated user is not the creator of the record."""

    message = "You are not allowed to modify this place."
    code = "FORBIDDEN"
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentials(PlacesAPIError):
    message = "Invalid credentials, could not log you in."
    code = "INVALID_CREDENTIALS"
    status_code = status.HTTP_401_UNAUTHORIZED


# --- Missing records ---


class NotFound(PlacesAPIError):
    message = "Could not find the requested resource."
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class PlaceNotFound(NotFound):
    def __init__(self, place_id: int):
        super().__init__(f"Could not find a place for the provided id ({place_id}).")
        self.place_id = place_id


class PlacesForUserNotFound(NotFound):
    def __init__(self, user_id: int):
        super().__init__(f"Could not find places for the provided user id ({user_id}).")
        self.user_id = user_id


class UserNotFound(NotFound):
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__(f"Could not find user for the provided id ({user_id}).")
        self.user_id = user_id


class UserExists(PlacesAPIError):
    message = "User exists already, please login instead."
    code = "USER_EXISTS"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


# --- Primitive failures ---


class StoreUnavailable(PlacesAPIError):
    message = "Something went wrong, please try again later."
    code = "STORE_UNAVAILABLE"


class StoreConflict(StoreUnavailable):
    """A write violated a uniqueness or integrity constraint."""

    code = "STORE_CONFLICT"


class CryptoFailure(PlacesAPIError):
    message = "Password hashing failed."
    code = "CRYPTO_FAILURE"


class SigningFailure(PlacesAPIError):
    message = "Token signing failed."
    code = "SIGNING_FAILURE"


class GeocodingFailure(PlacesAPIError):
    """Address could not be resolved; carries the provider-specific status."""

    message = "Could not find location for the specified address."
    code = "GEOCODING_FAILURE"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


# --- Operation failures ---


class LookupFailed(PlacesAPIError):
    message = "Looking up users failed, please try again later."
    code = "LOOKUP_FAILED"


class PlaceCreationFailed(PlacesAPIError):
    message = "Creating place failed, please try again."
    code = "PLACE_CREATION_FAILED"


class UpdateFailed(PlacesAPIError):
    message = "Something went wrong, could not update place."
    code = "UPDATE_FAILED"


class DeletionFailed(PlacesAPIError):
    message = "Something went wrong, could not delete place."
    code = "DELETION_FAILED"


class SignupFailed(PlacesAPIError):
    message = "Signing up failed, please try again later."
    code = "SIGNUP_FAILED"


class LoginFailed(PlacesAPIError):
    message = "Logging in failed, please try again later."
    code = "LOGIN_FAILED"


# --- Handlers ---


async def places_api_exception_handler(request: Request, exc: PlacesAPIError) -> JSONResponse:
    """Render a PlacesAPIError as a JSON response."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request body/path validation errors as a 422."""
    logger.info(f"Rejected input for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=ValidationFailed.status_code,
        content=ValidationFailed().to_dict(),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path, wrong method) in the uniform shape."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        content = {"message": "Could not find this route.", "code": "ROUTE_NOT_FOUND"}
    else:
        content = {"message": str(exc.detail), "code": "HTTP_ERROR"}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for anything that escaped the services."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=PlacesAPIError().to_dict(),
    )
