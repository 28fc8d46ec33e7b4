"""Places API client: nearby businesses of one type around a coordinate"""

from typing import Optional

import httpx

from app.services.google_maps.google_maps_config import GoogleMapsSettings
from app.services.google_maps.types import Coordinates, PlaceCandidate
from app.utils import logger
from app.utils.errors import UpstreamUnavailableError

SERVICE_NAME = "places"


class PlacesClient:
    """Wraps the Places Nearby Search endpoint. No retries."""

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

    async def nearby_search(
        self,
        center: Coordinates,
        radius_meters: int,
        business_type: str,
    ) -> list[PlaceCandidate]:
        """
        Find businesses of ``business_type`` within ``radius_meters`` of ``center``.

        ZERO_RESULTS is an empty list; any other non-OK status, a network failure
        or an HTTP error raises UpstreamUnavailableError.
        """
        if not self.is_configured():
            logger.error("Google Maps API key not configured")
            raise UpstreamUnavailableError(SERVICE_NAME, "API key not configured")

        params = {
            "location": f"{center.lat},{center.lng}",
            "radius": radius_meters,
            "type": business_type,
            "key": self.settings.GOOGLE_MAPS_API_KEY,
            "language": self.settings.GOOGLE_MAPS_LANGUAGE,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.GOOGLE_MAPS_TIMEOUT,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    f"{self.settings.GOOGLE_MAPS_BASE_URL}/place/nearbysearch/json",
                    params=params,
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Places request failed ({business_type} near {center}): {e}")
            raise UpstreamUnavailableError(SERVICE_NAME, str(e)) from e
        except ValueError as e:
            logger.error(f"Places returned invalid JSON: {e}")
            raise UpstreamUnavailableError(SERVICE_NAME, "invalid response body") from e

        if not isinstance(payload, dict):
            logger.error("Places returned a non-object body")
            raise UpstreamUnavailableError(SERVICE_NAME, "invalid response body")

        status = payload.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            logger.error(
                f"Places service error ({business_type} near {center}): {status} "
                f"{payload.get('error_message', '')}"
            )
            raise UpstreamUnavailableError(SERVICE_NAME, status or "missing status")

        candidates = []
        for place in payload.get("results", []):
            candidate = self._parse_place(place)
            if candidate is not None:
                candidates.append(candidate)

        logger.info(
            f"Places returned {len(candidates)} {business_type} result(s) "
            f"within {radius_meters}m"
        )
        return candidates

    @staticmethod
    def _parse_place(place: dict) -> Optional[PlaceCandidate]:
        location = place.get("geometry", {}).get("location", {})
        try:
            coordinates = Coordinates(lat=float(location["lat"]), lng=float(location["lng"]))
        except (KeyError, TypeError, ValueError):
            # Without a location it cannot be ranked
            logger.debug(f"Skipping place without location: {place.get('place_id')}")
            return None

        return PlaceCandidate(
            name=place.get("name", ""),
            location=coordinates,
            place_id=place.get("place_id"),
            address=place.get("vicinity") or place.get("formatted_address"),
            rating=place.get("rating"),
            total_reviews=place.get("user_ratings_total", 0),
            phone=place.get("formatted_phone_number"),
            website=place.get("website"),
            operational_status=place.get("business_status"),
        )
