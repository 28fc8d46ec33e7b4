"""Per-address sliding-window rate limiting backed by the request log table."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.rate_limit_request import RateLimitRequest
from app.utils import logger


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    count: int  # Requests in the window before this one
    retry_after_seconds: int = 0


class RateLimitService:
    """Allows at most ``max_requests`` per address in the trailing window.

    Denied requests are only logged when ``count_denied`` is set; otherwise a
    client that keeps retrying is unblocked as soon as its allowed requests
    age out of the window.
    """

    def __init__(
        self,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        count_denied: Optional[bool] = None,
    ):
        self.max_requests = max_requests or settings.rate_limit_max_requests
        self.window = timedelta(seconds=window_seconds or settings.rate_limit_window_seconds)
        self.count_denied = (
            settings.rate_limit_count_denied if count_denied is None else count_denied
        )

    async def allow(
        self,
        ip_address: str,
        db: AsyncSession,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> RateLimitDecision:
        """Count recent requests from ``ip_address`` and log this one. Commits."""
        now = now or datetime.utcnow()
        window_start = now - self.window

        result = await db.execute(
            select(func.count(), func.min(RateLimitRequest.created_at)).where(
                RateLimitRequest.ip_address == ip_address,
                RateLimitRequest.created_at > window_start,
            )
        )
        count, oldest = result.one()
        allowed = count < self.max_requests

        if allowed or self.count_denied:
            db.add(RateLimitRequest(ip_address=ip_address, user_id=user_id, created_at=now))
            await db.commit()

        if allowed:
            return RateLimitDecision(allowed=True, count=count)

        # The window frees up when its oldest request ages out
        retry_after = math.ceil(((oldest + self.window) - now).total_seconds()) if oldest else 1
        logger.warning(
            f"Rate limit exceeded for {ip_address}: {count} requests in "
            f"{int(self.window.total_seconds())}s"
        )
        return RateLimitDecision(allowed=False, count=count, retry_after_seconds=max(retry_after, 1))

    async def purge_expired(
        self,
        db: AsyncSession,
        now: Optional[datetime] = None,
    ) -> int:
        """Delete log rows that can no longer fall inside any window. Commits."""
        now = now or datetime.utcnow()
        result = await db.execute(
            delete(RateLimitRequest).where(RateLimitRequest.created_at <= now - self.window)
        )
        await db.commit()
        return result.rowcount or 0


# Global instance
rate_limit_service = RateLimitService()
