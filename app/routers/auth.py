"""Authentication router for login and user info"""


from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.middleware import get_client_ip
from app.models import User
from app.services.account_service import account_service
from app.services.firebase import get_current_user, get_current_user_or_create
from app.schemas.user import LoginResponse, UserResponse
from app.utils.errors import PermissionDeniedError
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    user: User = Depends(get_current_user_or_create),
    client_ip: str = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
):
    """
    Verify Firebase token and login or register the user.

    - New identities get an account with the trial search allowance
    - Banned users are refused
    """
    if user.is_banned:
        logger.info(f"Refused login for banned user {user.id}")
        raise PermissionDeniedError("Your account has been banned. Please contact support.")

    is_new_user = getattr(request.state, "is_new_user", False)
    if not is_new_user:
        user = await account_service.record_login(user, client_ip, db)

    return LoginResponse(
        user=UserResponse.model_validate(user),
        is_new_user=is_new_user,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """
    Get current authenticated user's information, including remaining searches.
    """
    return UserResponse.model_validate(user)
