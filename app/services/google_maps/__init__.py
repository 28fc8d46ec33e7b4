"""Google Maps Platform clients (Geocoding, Places)"""

from app.services.google_maps.google_maps_config import GoogleMapsSettings
from app.services.google_maps.types import Coordinates, PlaceCandidate
from app.services.google_maps.geocoding_client import GeocodingClient
from app.services.google_maps.places_client import PlacesClient

__all__ = [
    "GoogleMapsSettings",
    "Coordinates",
    "PlaceCandidate",
    "GeocodingClient",
    "PlacesClient",
]
