"""Admin dashboard schemas"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from app.schemas.search import SearchHistoryItem


UserFilter = Literal["all", "admin", "banned", "active"]


class AdminUserResponse(BaseModel):
    """User row in the admin user table"""
    id: int
    email: EmailStr
    name: str | None
    remaining_searches: int
    is_premium: bool
    is_admin: bool
    is_banned: bool
    is_active: bool
    registration_ip: str | None
    last_login_at: datetime | None
    last_search_at: datetime | None
    created_at: datetime

    class Config:
        from_attributes = True


class AdminUserUpdate(BaseModel):
    """Admin edit of a user; only provided fields change"""
    name: str | None = Field(None, max_length=200)
    remaining_searches: int | None = Field(None, ge=0)
    is_admin: bool | None = None
    is_premium: bool | None = None


class CountByKey(BaseModel):
    key: str
    count: int


class AdminSearchItem(SearchHistoryItem):
    """Search row in the admin history table"""
    user_id: int
    user_email: str | None = None
    ip_address: str | None


class AdminStatsResponse(BaseModel):
    total_users: int
    active_users: int  # Searched within the activity window
    banned_users: int
    total_searches: int
    today_searches: int
    top_business_types: list[CountByKey]
    top_cities: list[CountByKey]
    recent_searches: list[AdminSearchItem]


class IPUsageResponse(BaseModel):
    ip_address: str
    account_count: int
    is_blocked: bool
    is_suspicious: bool
    first_seen: datetime
    last_seen: datetime

    class Config:
        from_attributes = True
