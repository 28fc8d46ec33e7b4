"""Account lifecycle: provisioning on first login, login bookkeeping, deletion."""

import asyncio
from datetime import datetime
from typing import Optional

from firebase_admin import auth
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User
from app.services.abuse_prevention import abuse_prevention_service
from app.services.firebase.firebase_config import get_firebase_app
from app.utils import logger
from app.utils.errors import PermissionDeniedError


class AccountService:
    """Creates, updates and deletes User rows around Firebase identities."""

    async def provision_user(
        self,
        firebase_uid: str,
        email: str,
        name: Optional[str],
        ip_address: str,
        db: AsyncSession,
    ) -> User:
        """Create a user with the trial allowance and count it against its address.

        Raises:
            PermissionDeniedError: If the address is blocked
        """
        if await abuse_prevention_service.is_blocked(ip_address, db):
            logger.warning(f"Refused account creation for {email} from blocked address {ip_address}")
            raise PermissionDeniedError("Account creation from your network has been blocked.")

        now = datetime.utcnow()
        user = User(
            firebase_uid=firebase_uid,
            email=email,
            name=name,
            remaining_searches=settings.trial_searches,
            registration_ip=ip_address,
            last_login_at=now,
            last_login_ip=ip_address,
        )
        db.add(user)
        await abuse_prevention_service.record_account_creation(ip_address, db, now=now)

        await db.commit()
        await db.refresh(user)

        logger.info(
            f"Provisioned user {user.id} with {user.remaining_searches} trial searches"
        )
        return user

    async def record_login(
        self,
        user: User,
        ip_address: str,
        db: AsyncSession,
    ) -> User:
        user.last_login_at = datetime.utcnow()
        user.last_login_ip = ip_address
        await db.commit()
        await db.refresh(user)
        return user

    async def delete_account(
        self,
        user: User,
        db: AsyncSession,
        delete_auth_user: bool = True,
    ) -> None:
        """Delete the user and, through the ORM cascade, its searches and results.

        The Firebase identity is removed afterwards; a failure there is logged
        and does not restore the database rows.
        """
        user_id = user.id
        firebase_uid = user.firebase_uid

        await db.delete(user)
        await db.commit()
        logger.info(f"Deleted user {user_id} and their search history")

        if not delete_auth_user:
            return

        try:
            get_firebase_app()
            await asyncio.to_thread(auth.delete_user, firebase_uid)
        except auth.UserNotFoundError:
            logger.info(f"Firebase user for {user_id} was already deleted")
        except Exception as e:
            logger.error(f"Failed to delete Firebase user for {user_id}: {e}")


# Global instance
account_service = AccountService()
