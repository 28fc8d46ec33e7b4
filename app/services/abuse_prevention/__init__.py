"""Abuse prevention: per-address account tracking and blocking."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.middleware import get_client_ip
from app.services.abuse_prevention.abuse_prevention_service import (
    abuse_prevention_service,
    AbusePreventionService,
)
from app.utils.errors import PermissionDeniedError


async def reject_blocked_address(
    client_ip: str = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
) -> str:
    """Route dependency refusing requests from blocked addresses."""
    if await abuse_prevention_service.is_blocked(client_ip, db):
        raise PermissionDeniedError("Access from your network has been blocked.")
    return client_ip


__all__ = ["abuse_prevention_service", "AbusePreventionService", "reject_blocked_address"]
