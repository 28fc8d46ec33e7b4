"""
Background scheduler service for periodic maintenance.

Runs inside the FastAPI process, so no external cron job is needed.
"""

import asyncio
from typing import Optional

from app.config import settings
from app.utils import logger
from app.utils.sentry_utils import wrap_with_sentry


class SchedulerService:
    """
    Background scheduler that runs periodic tasks.

    Currently handles:
    - Deleting search cache entries past the retention horizon
    - Deleting rate-limit log rows that have left the window
    """

    def __init__(self, interval_seconds: Optional[int] = None):
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self.interval_seconds = interval_seconds or settings.cache_sweep_interval_hours * 3600

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start the background scheduler."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_scheduler())
        logger.info(f"Background scheduler started (interval={self.interval_seconds}s)")

    async def stop(self):
        """Stop the background scheduler gracefully."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Background scheduler stopped")

    async def _run_scheduler(self):
        """Main scheduler loop."""
        # Let the app finish starting up first
        await asyncio.sleep(5)

        while self._running:
            try:
                await self.run_sweep()
            except Exception as e:
                logger.error(f"Scheduler error in maintenance sweep: {e}", exc_info=True)

            try:
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                break

    @wrap_with_sentry
    async def run_sweep(self) -> dict:
        """Purge expired cache entries and rate-limit rows. Returns deleted counts."""
        from app.db import get_db_session
        from app.services.rate_limit import rate_limit_service
        from app.services.search import SearchCacheService

        async with get_db_session() as db:
            cache_deleted = await SearchCacheService().purge_expired(db)
            requests_deleted = await rate_limit_service.purge_expired(db)

        logger.info(
            f"Scheduler: purged {cache_deleted} cache entr(ies), "
            f"{requests_deleted} rate-limit row(s)"
        )
        return {"cache_entries": cache_deleted, "rate_limit_requests": requests_deleted}


# Global scheduler instance
scheduler_service = SchedulerService()
