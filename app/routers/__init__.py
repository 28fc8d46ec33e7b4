"""API routers module"""

from app.routers.auth import router as auth_router
from app.routers.users import router as users_router
from app.routers.search import router as search_router
from app.routers.rate_limit import router as rate_limit_router
from app.routers.admin import router as admin_router

__all__ = [
    "auth_router",
    "users_router",
    "search_router",
    "rate_limit_router",
    "admin_router",
]
