"""Admin router: statistics, user moderation, search history and IP usage"""

from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.models import BusinessResult, IPUsageRecord, SearchRecord, User
from app.services.abuse_prevention import abuse_prevention_service
from app.services.account_service import account_service
from app.services.firebase import get_current_admin
from app.schemas.admin import (
    AdminSearchItem,
    AdminStatsResponse,
    AdminUserResponse,
    AdminUserUpdate,
    CountByKey,
    IPUsageResponse,
    UserFilter,
)
from app.schemas.common import MessageResponse, PaginatedResponse, PaginationMeta
from app.schemas.search import BusinessResultSchema
from app.utils.constants import (
    ACTIVE_USER_WINDOW_DAYS,
    DEFAULT_PAGE_SIZE,
    MAX_ADMIN_SEARCHES,
    MAX_PAGE_SIZE,
    RECENT_SEARCHES_LIMIT,
    TOP_BREAKDOWN_LIMIT,
)
from app.utils.errors import NotFoundError
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


async def _get_user_or_404(user_id: int, db: AsyncSession) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")
    return user


async def _search_items(db: AsyncSession, limit: int) -> list[AdminSearchItem]:
    result = await db.execute(
        select(SearchRecord, User.email)
        .outerjoin(User, User.id == SearchRecord.user_id)
        .order_by(SearchRecord.created_at.desc(), SearchRecord.id.desc())
        .limit(limit)
    )
    return [
        AdminSearchItem(
            id=record.id,
            user_id=record.user_id,
            user_email=email,
            city=record.city,
            business_type=record.business_type,
            radius_km=record.radius_km,
            results_count=record.results_count,
            ip_address=record.ip_address,
            center_lat=record.center_lat,
            center_lng=record.center_lng,
            created_at=record.created_at,
        )
        for record, email in result.all()
    ]


async def _top_counts(db: AsyncSession, column) -> list[CountByKey]:
    result = await db.execute(
        select(column, func.count().label("total"))
        .group_by(column)
        .order_by(func.count().desc(), column)
        .limit(TOP_BREAKDOWN_LIMIT)
    )
    return [CountByKey(key=key, count=count) for key, count in result.all()]


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Dashboard totals, activity and the most searched types and cities.
    """
    now = datetime.utcnow()
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    active_since = now - timedelta(days=ACTIVE_USER_WINDOW_DAYS)

    total_users = (await db.execute(select(func.count()).select_from(User))).scalar()
    banned_users = (
        await db.execute(select(func.count()).select_from(User).where(User.is_banned.is_(True)))
    ).scalar()
    active_users = (
        await db.execute(
            select(func.count()).select_from(User).where(User.last_search_at > active_since)
        )
    ).scalar()
    total_searches = (await db.execute(select(func.count()).select_from(SearchRecord))).scalar()
    today_searches = (
        await db.execute(
            select(func.count())
            .select_from(SearchRecord)
            .where(SearchRecord.created_at >= today_start)
        )
    ).scalar()

    return AdminStatsResponse(
        total_users=total_users,
        active_users=active_users,
        banned_users=banned_users,
        total_searches=total_searches,
        today_searches=today_searches,
        top_business_types=await _top_counts(db, SearchRecord.business_type),
        top_cities=await _top_counts(db, SearchRecord.city),
        recent_searches=await _search_items(db, RECENT_SEARCHES_LIMIT),
    )


@router.get("/users", response_model=PaginatedResponse[AdminUserResponse])
async def list_users(
    filter: UserFilter = "all",
    q: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    List users, newest first, filtered by role/status and email/name text.
    """
    query = select(User)

    if filter == "admin":
        query = query.where(User.is_admin.is_(True))
    elif filter == "banned":
        query = query.where(User.is_banned.is_(True))
    elif filter == "active":
        query = query.where(User.is_banned.is_(False), User.is_admin.is_(False))

    if q:
        pattern = f"%{q.strip()}%"
        query = query.where(or_(User.email.ilike(pattern), User.name.ilike(pattern)))

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar()

    result = await db.execute(
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    users = result.scalars().all()

    return PaginatedResponse[AdminUserResponse](
        items=[AdminUserResponse.model_validate(u) for u in users],
        pagination=PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=(total + limit - 1) // limit if total > 0 else 0,
        ),
    )


@router.patch("/users/{user_id}", response_model=AdminUserResponse)
async def update_user(
    user_id: int,
    data: AdminUserUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Edit a user's name, remaining searches, admin or premium flag.
    """
    user = await _get_user_or_404(user_id, db)

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    logger.info(f"Admin {admin.id} updated user {user_id}: {sorted(update_data)}")
    return AdminUserResponse.model_validate(user)


@router.post("/users/{user_id}/ban", response_model=AdminUserResponse)
async def ban_user(
    user_id: int,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Ban a user. Banned users cannot log in or search.
    """
    user = await _get_user_or_404(user_id, db)
    user.is_banned = True
    await db.commit()
    await db.refresh(user)

    logger.info(f"Admin {admin.id} banned user {user_id}")
    return AdminUserResponse.model_validate(user)


@router.post("/users/{user_id}/unban", response_model=AdminUserResponse)
async def unban_user(
    user_id: int,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Lift a user's ban.
    """
    user = await _get_user_or_404(user_id, db)
    user.is_banned = False
    await db.commit()
    await db.refresh(user)

    logger.info(f"Admin {admin.id} unbanned user {user_id}")
    return AdminUserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a user together with their search history.
    """
    user = await _get_user_or_404(user_id, db)
    await account_service.delete_account(user, db)

    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return MessageResponse(message="User deleted successfully")


@router.get("/searches", response_model=list[AdminSearchItem])
async def list_searches(
    limit: int = Query(default=MAX_ADMIN_SEARCHES, ge=1, le=MAX_ADMIN_SEARCHES),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Most recent searches across all users, with the owner's email.
    """
    return await _search_items(db, limit)


@router.get("/searches/{search_id}/results", response_model=list[BusinessResultSchema])
async def get_search_results(
    search_id: int,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Stored businesses of one search, in ranked order.
    """
    result = await db.execute(select(SearchRecord.id).where(SearchRecord.id == search_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Search not found")

    results = await db.execute(
        select(BusinessResult)
        .where(BusinessResult.search_id == search_id)
        .order_by(BusinessResult.position)
    )
    return [BusinessResultSchema.model_validate(r) for r in results.scalars().all()]


@router.get("/ip-usage", response_model=list[IPUsageResponse])
async def list_ip_usage(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Addresses ordered by number of accounts created from them.
    """
    result = await db.execute(
        select(IPUsageRecord).order_by(
            IPUsageRecord.account_count.desc(), IPUsageRecord.last_seen.desc()
        )
    )
    return [IPUsageResponse.model_validate(r) for r in result.scalars().all()]


@router.post("/ip-usage/{ip_address}/block", response_model=IPUsageResponse)
async def block_ip(
    ip_address: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Block an address from creating accounts and searching.
    """
    record = await abuse_prevention_service.set_blocked(ip_address, True, db)
    logger.info(f"Admin {admin.id} blocked {ip_address}")
    return IPUsageResponse.model_validate(record)


@router.post("/ip-usage/{ip_address}/unblock", response_model=IPUsageResponse)
async def unblock_ip(
    ip_address: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Unblock an address.
    """
    record = await abuse_prevention_service.set_blocked(ip_address, False, db)
    logger.info(f"Admin {admin.id} unblocked {ip_address}")
    return IPUsageResponse.model_validate(record)
