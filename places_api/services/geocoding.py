"""Geocoding service for resolving addresses to coordinates."""

import logging
from dataclasses import dataclass

import httpx
from fastapi import status

from places_api.config import get_settings
from places_api.exceptions import GeocodingFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


class GeocodingService:
    """Service for the Google Geocoding API."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None) -> None:
        self.settings = get_settings()
        self.api_key = api_key or self.settings.google_api_key
        self.base_url = base_url or self.settings.geocoding_url
        self.timeout = self.settings.geocoding_timeout

    async def get_coordinates(self, address: str) -> Coordinates:
        """Resolve an address to the coordinates of its first match."""
        if not self.api_key:
            raise GeocodingFailure(
                "Geocoding is not configured, could not resolve the address.",
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.base_url,
                    params={"address": address, "key": self.api_key},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"HTTP error calling geocoding API: {e}")
            raise GeocodingFailure(
                "Could not reach the geocoding service.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            ) from e

        provider_status = data.get("status") if isinstance(data, dict) else None
        no_results = provider_status == "OK" and not data.get("results")
        if provider_status == "ZERO_RESULTS" or no_results:
            logger.warning(f"No geocoding results for address '{address}'")
            raise GeocodingFailure()
        if provider_status != "OK":
            logger.error(f"Geocoding API answered with status {provider_status!r}")
            raise GeocodingFailure(
                "The geocoding service rejected the request.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            )

        try:
            location = data["results"][0]["geometry"]["location"]
            return Coordinates(lat=float(location["lat"]), lng=float(location["lng"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Malformed geocoding response: {e}")
            raise GeocodingFailure(
                "The geocoding service returned an unreadable response.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            ) from e


def get_geocoding_service() -> GeocodingService:
    """Get a geocoding service instance."""
    return GeocodingService()
