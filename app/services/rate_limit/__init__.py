"""Per-address rate limiting"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.middleware import get_client_ip
from app.services.rate_limit.rate_limit_service import (
    RateLimitDecision,
    RateLimitService,
    rate_limit_service,
)
from app.utils.errors import ResourceExhaustedError


def get_rate_limit_service() -> RateLimitService:
    return rate_limit_service


async def enforce_rate_limit(
    client_ip: str = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
    limiter: RateLimitService = Depends(get_rate_limit_service),
) -> RateLimitDecision:
    """Route dependency that rejects the request once the address is over its limit."""
    decision = await limiter.allow(client_ip, db)
    if not decision.allowed:
        raise ResourceExhaustedError(
            details={"retry_after_seconds": decision.retry_after_seconds}
        )
    return decision


__all__ = [
    "RateLimitDecision",
    "RateLimitService",
    "rate_limit_service",
    "get_rate_limit_service",
    "enforce_rate_limit",
]
