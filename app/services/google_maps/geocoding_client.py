"""Geocoding API client: free-text place name to coordinates"""

from typing import Optional

import httpx

from app.services.google_maps.google_maps_config import GoogleMapsSettings
from app.services.google_maps.types import Coordinates
from app.utils import logger
from app.utils.errors import LocationNotFoundError, UpstreamUnavailableError

SERVICE_NAME = "geocoding"

# Statuses that describe the service (quota, key, outage) rather than the query
SERVICE_ERROR_STATUSES = {"OVER_DAILY_LIMIT", "OVER_QUERY_LIMIT", "REQUEST_DENIED", "UNKNOWN_ERROR"}


class GeocodingClient:
    """Resolves a city or address to a coordinate pair. No retries."""

    def __init__(
        self,
        settings: Optional[GoogleMapsSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._transport = transport

    @property
    def settings(self) -> GoogleMapsSettings:
        if self._settings is None:
            self._settings = GoogleMapsSettings()
        return self._settings

    def is_configured(self) -> bool:
        return bool(self.settings.GOOGLE_MAPS_API_KEY)

    async def geocode(self, address: str) -> Coordinates:
        """
        Geocode a free-text address, returning the first match.

        Raises:
            LocationNotFoundError: No result for the address
            UpstreamUnavailableError: Network failure, HTTP error or service-level error status
        """
        if not self.is_configured():
            logger.error("Google Maps API key not configured")
            raise UpstreamUnavailableError(SERVICE_NAME, "API key not configured")

        params = {
            "address": address,
            "key": self.settings.GOOGLE_MAPS_API_KEY,
            "language": self.settings.GOOGLE_MAPS_LANGUAGE,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.GOOGLE_MAPS_TIMEOUT,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    f"{self.settings.GOOGLE_MAPS_BASE_URL}/geocode/json",
                    params=params,
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Geocoding request failed for '{address}': {e}")
            raise UpstreamUnavailableError(SERVICE_NAME, str(e)) from e
        except ValueError as e:
            logger.error(f"Geocoding returned invalid JSON for '{address}': {e}")
            raise UpstreamUnavailableError(SERVICE_NAME, "invalid response body") from e

        if not isinstance(payload, dict):
            logger.error(f"Geocoding returned a non-object body for '{address}'")
            raise UpstreamUnavailableError(SERVICE_NAME, "invalid response body")

        status = payload.get("status")
        results = payload.get("results") or []

        if status in SERVICE_ERROR_STATUSES:
            logger.error(
                f"Geocoding service error for '{address}': {status} "
                f"{payload.get('error_message', '')}"
            )
            raise UpstreamUnavailableError(SERVICE_NAME, status)

        if status != "OK" or not results:
            logger.info(f"Geocoding found no location for '{address}' (status={status})")
            raise LocationNotFoundError()

        location = results[0].get("geometry", {}).get("location", {})
        try:
            coordinates = Coordinates(lat=float(location["lat"]), lng=float(location["lng"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Geocoding result for '{address}' has no usable location: {location}")
            raise UpstreamUnavailableError(SERVICE_NAME, "malformed result") from e

        logger.debug(f"Geocoded '{address}' to ({coordinates.lat}, {coordinates.lng})")
        return coordinates
