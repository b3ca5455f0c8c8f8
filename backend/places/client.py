"""
Place lookup client (Google Geocoding / Place Details).

Used by GET /api/places/geocode to fill a job's latitude, longitude,
formattedAddress and placeId.
"""

import logging
from typing import Optional

import httpx

from config.settings import settings
from errors import ConfigurationError, StorageError, ValidationError
from schemas.base import CamelModel

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
PLACE_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"


class PlaceResult(CamelModel):
    place_id: Optional[str] = None
    formatted_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


def _to_place(result: dict) -> PlaceResult:
    location = (result.get("geometry") or {}).get("location") or {}
    return PlaceResult(
        place_id=result.get("place_id"),
        formatted_address=result.get("formatted_address"),
        latitude=location.get("lat"),
        longitude=location.get("lng"),
    )


class GeocodingClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_key: Google Maps API key (defaults to GOOGLE_MAPS_API_KEY)
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests)
        """
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self.timeout = timeout or settings.GEOCODING_TIMEOUT_SECONDS
        self._transport = transport

    async def lookup(self, address: Optional[str] = None, place_id: Optional[str] = None) -> Optional[PlaceResult]:
        """
        Resolve a place id (preferred) or a free-text address.

        Returns:
            First match, or None when nothing matches

        Raises:
            ValidationError: If neither address nor place_id is given
            ConfigurationError: If no API key is configured
            StorageError: If the lookup service fails
        """
        if place_id:
            return await self.place_details(place_id)
        if address and address.strip():
            return await self.geocode(address.strip())
        raise ValidationError("address or placeId is required")

    async def geocode(self, address: str) -> Optional[PlaceResult]:
        data = await self._get(GEOCODE_URL, {"address": address, "language": "en"})
        results = data.get("results") or []
        return _to_place(results[0]) if results else None

    async def place_details(self, place_id: str) -> Optional[PlaceResult]:
        data = await self._get(PLACE_DETAILS_URL, {
            "place_id": place_id,
            "fields": "place_id,formatted_address,geometry",
            "language": "en",
        })
        result = data.get("result")
        return _to_place(result) if result else None

    async def _get(self, url: str, params: dict) -> dict:
        if not self.api_key:
            raise ConfigurationError("Google Maps API key not configured")

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(url, params={**params, "key": self.api_key})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Geocoding request failed: {e}")
            raise StorageError("Failed to geocode location", original_error=e)

        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            logger.error(f"Geocoding service returned {status}: {data.get('error_message')}")
            raise StorageError("Failed to geocode location")
        return data


def get_geocoding_client() -> GeocodingClient:
    """FastAPI dependency (overridden in tests)"""
    return GeocodingClient()
