"""SearchCacheEntry model for short-lived search result caching"""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String

from app.db.database import Base


class SearchCacheEntry(Base):
    """Cached businesses and search center for a (city, type, radius) query.

    Entries older than the cache TTL are never served; they are overwritten
    by the next search for the same key or removed by the scheduled sweep.
    """

    __tablename__ = "search_cache_entries"

    id = Column(Integer, primary_key=True, index=True)
    cache_key = Column(String(400), unique=True, nullable=False, index=True)
    city = Column(String(200), nullable=False)  # Normalized (trimmed, lower-case)
    business_type = Column(String(100), nullable=False)
    radius_km = Column(Float, nullable=False)
    businesses = Column(JSON, nullable=False, default=list)
    center_lat = Column(Float, nullable=False)
    center_lng = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<SearchCacheEntry(key='{self.cache_key}', created_at={self.created_at})>"
