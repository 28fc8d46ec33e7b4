"""Quota service: per-user trial search allowance and ban enforcement."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.utils.errors import NotFoundError, QuotaExhaustedError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class DenialReason(str, Enum):
    BANNED = "banned"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    remaining: int
    reason: Optional[DenialReason] = None


class QuotaService:
    """Checks and consumes the remaining-search counter on User."""

    async def check_and_reserve(
        self,
        user_id: int,
        db: AsyncSession,
    ) -> QuotaDecision:
        """Decide whether the user may start a search.

        Nothing is consumed here; ``commit`` does the decrement once the
        search has been persisted. The ban check comes first.

        Raises:
            NotFoundError: If the user does not exist
        """
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if user is None:
            raise NotFoundError("User not found.")

        remaining = user.remaining_searches or 0

        if user.is_banned:
            logger.info(f"Search denied for user {user_id}: banned")
            return QuotaDecision(allowed=False, remaining=remaining, reason=DenialReason.BANNED)

        if remaining <= 0 and not user.is_premium:
            logger.info(f"Search denied for user {user_id}: quota exhausted")
            return QuotaDecision(allowed=False, remaining=0, reason=DenialReason.EXHAUSTED)

        return QuotaDecision(allowed=True, remaining=remaining)

    async def commit(
        self,
        user_id: int,
        db: AsyncSession,
        now: Optional[datetime] = None,
    ) -> int:
        """Consume one search and stamp last_search_at. Does not commit the session.

        The decrement is a single conditional UPDATE, so two concurrent
        searches can never both spend the last unit. Premium users are not
        decremented.

        Returns the remaining count after the decrement.

        Raises:
            QuotaExhaustedError: If no unit was left to consume
        """
        now = now or datetime.utcnow()

        result = await db.execute(select(User.is_premium).where(User.id == user_id))
        is_premium = result.scalar_one_or_none()
        if is_premium is None:
            raise NotFoundError("User not found.")

        statement = update(User).where(User.id == user_id)
        if is_premium:
            statement = statement.values(last_search_at=now)
        else:
            statement = statement.where(User.remaining_searches > 0).values(
                remaining_searches=User.remaining_searches - 1,
                last_search_at=now,
            )

        result = await db.execute(statement.execution_options(synchronize_session=False))
        if result.rowcount == 0:
            logger.warning(f"Quota for user {user_id} was consumed by a concurrent request")
            raise QuotaExhaustedError()

        remaining_result = await db.execute(
            select(User.remaining_searches).where(User.id == user_id)
        )
        remaining = remaining_result.scalar_one()

        logger.info(f"Consumed one search for user {user_id}. Remaining: {remaining}")
        return remaining


# Global instance
quota_service = QuotaService()
