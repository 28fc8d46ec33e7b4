from datetime import datetime, timedelta

from sqlalchemy import func, select

from app.models import SearchCacheEntry
from app.services.google_maps import Coordinates
from app.services.search import CachedSearch, CacheKey, SearchCacheService

NOW = datetime(2026, 1, 1, 12, 0, 0)
CENTER = Coordinates(lat=39.78, lng=-89.65)


def _value(name="Cafe"):
    return CachedSearch(businesses=[{"name": name, "distance_km": 0.4}], center=CENTER)


def test_cache_key_normalizes_city_only():
    a = CacheKey.from_query("  Springfield ", "cafe", 5)
    b = CacheKey.from_query("springfield", "cafe", 5.0)
    c = CacheKey.from_query("springfield", "Cafe", 5)

    assert a == b
    assert str(a) == "springfield|cafe|5"
    assert a != c


async def test_put_then_get_returns_value(db):
    cache = SearchCacheService(ttl=timedelta(minutes=15))
    key = CacheKey.from_query("Springfield", "cafe", 5)

    await cache.put(key, _value(), db, now=NOW)
    await db.commit()

    hit = await cache.get(key, db, now=NOW + timedelta(minutes=5))

    assert hit is not None
    assert hit.value.businesses == [{"name": "Cafe", "distance_km": 0.4}]
    assert hit.value.center == CENTER
    assert hit.age == timedelta(minutes=5)


async def test_entry_is_stale_at_ttl(db):
    cache = SearchCacheService(ttl=timedelta(minutes=15))
    key = CacheKey.from_query("Springfield", "cafe", 5)
    await cache.put(key, _value(), db, now=NOW)
    await db.commit()

    assert await cache.get(key, db, now=NOW + timedelta(minutes=14, seconds=59)) is not None
    assert await cache.get(key, db, now=NOW + timedelta(minutes=15)) is None


async def test_differently_cased_cities_share_an_entry(db):
    cache = SearchCacheService()
    await cache.put(CacheKey.from_query("SPRINGFIELD", "cafe", 5), _value(), db, now=NOW)
    await db.commit()

    hit = await cache.get(CacheKey.from_query("springfield", "cafe", 5), db, now=NOW)

    assert hit is not None


async def test_put_overwrites_existing_entry(db):
    cache = SearchCacheService()
    key = CacheKey.from_query("Springfield", "cafe", 5)
    await cache.put(key, _value("Old"), db, now=NOW)
    await db.commit()

    later = NOW + timedelta(hours=1)
    await cache.put(key, _value("New"), db, now=later)
    await db.commit()

    hit = await cache.get(key, db, now=later)
    count = (await db.execute(select(func.count()).select_from(SearchCacheEntry))).scalar()

    assert hit.value.businesses[0]["name"] == "New"
    assert count == 1


async def test_purge_expired_deletes_only_old_entries(db):
    cache = SearchCacheService(retention=timedelta(hours=24))
    await cache.put(CacheKey.from_query("Old Town", "cafe", 5), _value(), db, now=NOW)
    await cache.put(
        CacheKey.from_query("New Town", "cafe", 5), _value(), db, now=NOW + timedelta(hours=20)
    )
    await db.commit()

    deleted = await cache.purge_expired(db, now=NOW + timedelta(hours=25))

    result = await db.execute(select(SearchCacheEntry.city))
    assert deleted == 1
    assert result.scalars().all() == ["new town"]
