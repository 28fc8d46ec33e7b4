"""User schemas for responses"""

from datetime import datetime
from pydantic import BaseModel, EmailStr


class UserResponse(BaseModel):
    """User basic response"""
    id: int
    email: EmailStr
    name: str | None
    remaining_searches: int
    is_premium: bool
    is_admin: bool
    last_search_at: datetime | None
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Login endpoint response"""
    user: UserResponse
    is_new_user: bool
