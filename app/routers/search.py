"""Business search router"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.models import SearchRecord, User
from app.services.abuse_prevention import reject_blocked_address
from app.services.firebase import get_current_user
from app.services.rate_limit import enforce_rate_limit
from app.services.search import SearchService, get_search_service
from app.schemas.common import ErrorResponse
from app.schemas.search import (
    BusinessTypeOption,
    SearchHistoryItem,
    SearchRequest,
    SearchResponse,
)
from app.utils.constants import BUSINESS_TYPE_LABELS, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter(prefix="/search", tags=["Search"])


@router.post(
    "",
    response_model=SearchResponse,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        402: {"model": ErrorResponse, "description": "No trial searches left"},
        403: {"model": ErrorResponse, "description": "Banned user or blocked address"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
async def search_businesses(
    data: SearchRequest,
    client_ip: str = Depends(reject_blocked_address),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    search_service: SearchService = Depends(get_search_service),
):
    """
    Search for businesses of a type within a radius of a city.

    Consumes one trial search unless the results come from the cache.
    """
    return await search_service.search(
        db=db,
        user_id=user.id,
        request=data,
        ip_address=client_ip,
    )


@router.get("/history", response_model=list[SearchHistoryItem])
async def get_search_history(
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the current user's most recent searches, newest first.
    """
    result = await db.execute(
        select(SearchRecord)
        .where(SearchRecord.user_id == user.id)
        .order_by(SearchRecord.created_at.desc(), SearchRecord.id.desc())
        .limit(limit)
    )
    return [SearchHistoryItem.model_validate(record) for record in result.scalars().all()]


@router.get("/business-types", response_model=list[BusinessTypeOption])
async def get_business_types():
    """
    List the business types offered by the search form.
    """
    return [
        BusinessTypeOption(value=value, label=label)
        for value, label in BUSINESS_TYPE_LABELS.items()
    ]
