"""Rate limit probe router"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.middleware import get_client_ip
from app.models import User
from app.services.firebase import get_optional_user
from app.services.rate_limit import RateLimitService, get_rate_limit_service
from app.utils.errors import ResourceExhaustedError

router = APIRouter(prefix="/rate-limit", tags=["Rate Limit"])


@router.post("/check")
async def check_rate_limit(
    client_ip: str = Depends(get_client_ip),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
    limiter: RateLimitService = Depends(get_rate_limit_service),
):
    """
    Record a request for the caller's address and report whether it is allowed.
    """
    decision = await limiter.allow(client_ip, db, user_id=user.id if user else None)

    if not decision.allowed:
        raise ResourceExhaustedError(
            details={"retry_after_seconds": decision.retry_after_seconds}
        )

    return {"allowed": True}
