"""Pydantic schemas for request/response validation"""

from app.schemas.common import (
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
)
from app.schemas.user import UserResponse, LoginResponse
from app.schemas.search import (
    SearchRequest,
    SearchResponse,
    SearchCenter,
    BusinessResultSchema,
    SearchHistoryItem,
    BusinessTypeOption,
    parse_search_request,
)
from app.schemas.admin import (
    AdminUserResponse,
    AdminUserUpdate,
    AdminSearchItem,
    AdminStatsResponse,
    IPUsageResponse,
)

__all__ = [
    # Common
    "ErrorResponse",
    "MessageResponse",
    "PaginatedResponse",
    "PaginationMeta",
    # User
    "UserResponse",
    "LoginResponse",
    # Search
    "SearchRequest",
    "SearchResponse",
    "SearchCenter",
    "BusinessResultSchema",
    "SearchHistoryItem",
    "BusinessTypeOption",
    "parse_search_request",
    # Admin
    "AdminUserResponse",
    "AdminUserUpdate",
    "AdminSearchItem",
    "AdminStatsResponse",
    "IPUsageResponse",
]
