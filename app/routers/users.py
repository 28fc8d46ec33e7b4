"""Users router for account management"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.models import User
from app.services.account_service import account_service
from app.services.firebase import get_current_user
from app.schemas.common import MessageResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.delete("/me", response_model=MessageResponse)
async def delete_my_account(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete the current user's account and search history.
    """
    await account_service.delete_account(user, db)
    return MessageResponse(message="Account deleted successfully")
