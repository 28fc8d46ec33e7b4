"""Great-circle distance and distance ranking"""

import math
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from app.services.google_maps.types import Coordinates, PlaceCandidate
from app.utils.constants import EARTH_RADIUS_KM


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometres, rounded to one decimal place."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 1)


@dataclass
class RankedBusiness:
    """A place candidate with its distance from the search center"""

    name: str
    lat: float
    lng: float
    distance_km: float
    place_id: Optional[str] = None
    address: Optional[str] = None
    rating: Optional[float] = None
    total_reviews: int = 0
    phone: Optional[str] = None
    website: Optional[str] = None
    operational_status: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


def rank_by_distance(center: Coordinates, candidates: Iterable[PlaceCandidate]) -> list[RankedBusiness]:
    """Attach distances and sort nearest first. Ties keep their input order."""
    ranked = [
        RankedBusiness(
            name=candidate.name,
            lat=candidate.location.lat,
            lng=candidate.location.lng,
            distance_km=distance_km(
                center.lat, center.lng, candidate.location.lat, candidate.location.lng
            ),
            place_id=candidate.place_id,
            address=candidate.address,
            rating=candidate.rating,
            total_reviews=candidate.total_reviews or 0,
            phone=candidate.phone,
            website=candidate.website,
            operational_status=candidate.operational_status,
        )
        for candidate in candidates
    ]
    # sorted() is stable
    return sorted(ranked, key=lambda business: business.distance_km)
