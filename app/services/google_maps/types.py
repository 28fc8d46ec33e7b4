"""Value types returned by the Google Maps clients"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class PlaceCandidate:
    """A business returned by nearby search, before ranking"""

    name: str
    location: Coordinates
    place_id: Optional[str] = None
    address: Optional[str] = None
    rating: Optional[float] = None
    total_reviews: int = 0
    phone: Optional[str] = None
    website: Optional[str] = None
    operational_status: Optional[str] = None
