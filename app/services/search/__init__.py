"""Business search pipeline"""

from typing import Optional

from app.services.google_maps import GeocodingClient, GoogleMapsSettings, PlacesClient
from app.services.quota_service import quota_service
from app.services.search.cache_service import (
    CachedSearch,
    CacheHit,
    CacheKey,
    SearchCacheService,
)
from app.services.search.distance import RankedBusiness, distance_km, rank_by_distance
from app.services.search.search_service import SearchService

_search_service: Optional[SearchService] = None


def get_search_service() -> SearchService:
    """FastAPI dependency returning the process-wide SearchService.

    Built on first use from GoogleMapsSettings; tests override this
    dependency to inject fake clients.
    """
    global _search_service

    if _search_service is None:
        maps_settings = GoogleMapsSettings()
        _search_service = SearchService(
            geocoding_client=GeocodingClient(maps_settings),
            places_client=PlacesClient(maps_settings),
            cache=SearchCacheService(),
            quota=quota_service,
        )

    return _search_service


__all__ = [
    "CachedSearch",
    "CacheHit",
    "CacheKey",
    "SearchCacheService",
    "RankedBusiness",
    "distance_km",
    "rank_by_distance",
    "SearchService",
    "get_search_service",
]
