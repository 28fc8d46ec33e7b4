"""Google Maps Platform configuration"""

import os
from pydantic_settings import BaseSettings


class GoogleMapsSettings(BaseSettings):
    """Settings for the Geocoding and Places web services"""

    GOOGLE_MAPS_API_KEY: str = os.getenv("GOOGLE_MAPS_API_KEY", "")

    GOOGLE_MAPS_BASE_URL: str = os.getenv(
        "GOOGLE_MAPS_BASE_URL", "https://maps.googleapis.com/maps/api"
    )

    # Timeout for API requests (seconds)
    GOOGLE_MAPS_TIMEOUT: float = float(os.getenv("GOOGLE_MAPS_TIMEOUT", "10"))

    # Language for formatted addresses
    GOOGLE_MAPS_LANGUAGE: str = os.getenv("GOOGLE_MAPS_LANGUAGE", "en")

    class Config:
        env_prefix = ""
