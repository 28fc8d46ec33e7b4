from app.db.database import Base
from app.models.user import User
from app.models.search_record import SearchRecord, BusinessResult
from app.models.search_cache_entry import SearchCacheEntry
from app.models.ip_usage_record import IPUsageRecord
from app.models.rate_limit_request import RateLimitRequest

__all__ = [
    "Base",
    "User",
    "SearchRecord",
    "BusinessResult",
    "SearchCacheEntry",
    "IPUsageRecord",
    "RateLimitRequest",
]
