from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import app.db
from app.models import RateLimitRequest
from app.services.google_maps import Coordinates
from app.services.scheduler import SchedulerService
from app.services.search import CachedSearch, CacheKey, SearchCacheService


async def test_run_sweep_purges_expired_rows(session_factory, monkeypatch):
    @asynccontextmanager
    async def fake_session():
        async with session_factory() as session:
            yield session
            await session.commit()

    monkeypatch.setattr(app.db, "get_db_session", fake_session)

    now = datetime.utcnow()
    async with session_factory() as session:
        cache = SearchCacheService()
        value = CachedSearch(businesses=[], center=Coordinates(lat=0, lng=0))
        await cache.put(CacheKey.from_query("old", "cafe", 5), value, session, now=now - timedelta(days=2))
        await cache.put(CacheKey.from_query("new", "cafe", 5), value, session, now=now)
        session.add(RateLimitRequest(ip_address="203.0.113.7", created_at=now - timedelta(hours=1)))
        session.add(RateLimitRequest(ip_address="203.0.113.7", created_at=now))
        await session.commit()

    counts = await SchedulerService(interval_seconds=60).run_sweep()

    assert counts == {"cache_entries": 1, "rate_limit_requests": 1}


async def test_start_and_stop():
    scheduler = SchedulerService(interval_seconds=60)

    await scheduler.start()
    assert scheduler.is_running

    await scheduler.stop()
    assert not scheduler.is_running
