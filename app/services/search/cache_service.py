"""Read-through/write-through search result cache stored in the database."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.search_cache_entry import SearchCacheEntry
from app.services.google_maps.types import Coordinates
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Normalized (city, business type, radius) cache key"""

    city: str
    business_type: str
    radius_km: float

    @classmethod
    def from_query(cls, city: str, business_type: str, radius_km: float) -> "CacheKey":
        # Only the city is case-normalized; type and radius match exactly
        return cls(
            city=city.strip().lower(),
            business_type=business_type,
            radius_km=float(radius_km),
        )

    def __str__(self) -> str:
        return f"{self.city}|{self.business_type}|{self.radius_km:g}"


@dataclass
class CachedSearch:
    businesses: list[dict]
    center: Coordinates


@dataclass
class CacheHit:
    value: CachedSearch
    age: timedelta


class SearchCacheService:
    """Search result cache with a fixed TTL.

    ``put`` only stages the write in the given session; the caller commits it
    together with the rest of the search transaction.
    """

    def __init__(
        self,
        ttl: Optional[timedelta] = None,
        retention: Optional[timedelta] = None,
    ):
        self.ttl = ttl or timedelta(minutes=settings.cache_ttl_minutes)
        self.retention = retention or timedelta(hours=settings.cache_retention_hours)

    async def get(
        self,
        key: CacheKey,
        db: AsyncSession,
        now: Optional[datetime] = None,
    ) -> Optional[CacheHit]:
        """Return a hit only for entries younger than the TTL."""
        now = now or datetime.utcnow()
        result = await db.execute(
            select(SearchCacheEntry).where(SearchCacheEntry.cache_key == str(key))
        )
        entry = result.scalar_one_or_none()

        if entry is None:
            return None

        age = now - entry.created_at
        if age >= self.ttl:
            # Left in place; the next put overwrites it
            logger.debug(f"Cache entry '{key}' is stale ({age})")
            return None

        return CacheHit(
            value=CachedSearch(
                businesses=list(entry.businesses or []),
                center=Coordinates(lat=entry.center_lat, lng=entry.center_lng),
            ),
            age=age,
        )

    async def put(
        self,
        key: CacheKey,
        value: CachedSearch,
        db: AsyncSession,
        now: Optional[datetime] = None,
    ) -> None:
        """Insert or overwrite the entry for ``key`` in a single upsert statement."""
        now = now or datetime.utcnow()
        values = {
            "cache_key": str(key),
            "city": key.city,
            "business_type": key.business_type,
            "radius_km": key.radius_km,
            "businesses": value.businesses,
            "center_lat": value.center.lat,
            "center_lng": value.center.lng,
            "created_at": now,
        }

        dialect = db.get_bind().dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        statement = insert(SearchCacheEntry).values(**values)
        statement = statement.on_conflict_do_update(
            index_elements=[SearchCacheEntry.cache_key],
            set_={
                "businesses": statement.excluded.businesses,
                "center_lat": statement.excluded.center_lat,
                "center_lng": statement.excluded.center_lng,
                "created_at": statement.excluded.created_at,
            },
        )
        await db.execute(statement)

    async def purge_expired(
        self,
        db: AsyncSession,
        older_than: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """Delete entries older than the retention horizon. Commits."""
        now = now or datetime.utcnow()
        cutoff = now - (older_than or self.retention)

        result = await db.execute(
            delete(SearchCacheEntry).where(SearchCacheEntry.created_at < cutoff)
        )
        await db.commit()

        deleted = result.rowcount or 0
        if deleted:
            logger.info(f"Purged {deleted} cache entries older than {cutoff.isoformat()}")
        return deleted
