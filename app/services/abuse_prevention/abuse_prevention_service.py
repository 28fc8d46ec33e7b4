"""Abuse prevention service: tracks accounts created per originating address."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.ip_usage_record import IPUsageRecord
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AbusePreventionService:
    """Service for spotting and blocking addresses that mass-create accounts."""

    async def get_record(
        self,
        ip_address: str,
        db: AsyncSession,
    ) -> Optional[IPUsageRecord]:
        result = await db.execute(
            select(IPUsageRecord).where(IPUsageRecord.ip_address == ip_address)
        )
        return result.scalar_one_or_none()

    async def is_blocked(
        self,
        ip_address: str,
        db: AsyncSession,
    ) -> bool:
        """Check if an address has been blocked by an admin."""
        record = await self.get_record(ip_address, db)
        return record is not None and record.is_blocked

    async def record_account_creation(
        self,
        ip_address: str,
        db: AsyncSession,
        now: Optional[datetime] = None,
    ) -> IPUsageRecord:
        """Count a new account against its originating address.

        A single upsert, so concurrent sign-ups from a new address neither
        collide on the unique ip_address nor lose increments. Does not commit;
        called inside the user-creation transaction.
        """
        now = now or datetime.utcnow()

        dialect = db.get_bind().dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        statement = insert(IPUsageRecord).values(
            ip_address=ip_address,
            account_count=1,
            is_blocked=False,
            first_seen=now,
            last_seen=now,
        )
        statement = statement.on_conflict_do_update(
            index_elements=[IPUsageRecord.ip_address],
            set_={
                "account_count": IPUsageRecord.account_count + 1,
                "last_seen": statement.excluded.last_seen,
            },
        )
        await db.execute(statement)

        # The row may already sit in the identity map with the old count
        result = await db.execute(
            select(IPUsageRecord)
            .where(IPUsageRecord.ip_address == ip_address)
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one()

        if record.is_suspicious:
            logger.warning(
                f"Address {ip_address} has created {record.account_count} accounts"
            )

        return record

    async def set_blocked(
        self,
        ip_address: str,
        blocked: bool,
        db: AsyncSession,
    ) -> IPUsageRecord:
        """Block or unblock an address, creating its record if it was never seen."""
        record = await self.get_record(ip_address, db)

        if record is None:
            now = datetime.utcnow()
            record = IPUsageRecord(
                ip_address=ip_address,
                account_count=0,
                first_seen=now,
                last_seen=now,
            )
            db.add(record)

        record.is_blocked = blocked
        await db.commit()
        await db.refresh(record)

        logger.info(f"Address {ip_address} {'blocked' if blocked else 'unblocked'}")
        return record


# Global instance
abuse_prevention_service = AbusePreventionService()
