"""Firebase authentication dependencies"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from firebase_admin import auth
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.middleware import get_client_ip
from app.models.user import User
from app.services.firebase.firebase_config import get_firebase_app
from app.utils.errors import (
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
)
from app.utils.logger import get_logger, user_id_var
from app.utils.sentry_utils import set_user_context

logger = get_logger(__name__)


@dataclass
class TokenData:
    """Decoded Firebase token data"""

    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    email_verified: bool = False


async def verify_token_async(id_token: str) -> TokenData:
    """
    Verify a Firebase ID token and extract user data.

    The Firebase SDK call is synchronous, so it runs in a worker thread.

    Raises:
        UnauthenticatedError: If token verification fails
    """
    get_firebase_app()

    try:
        decoded_token = await asyncio.to_thread(auth.verify_id_token, id_token)
    except auth.ExpiredIdTokenError:
        raise UnauthenticatedError("Token has expired")
    except auth.RevokedIdTokenError:
        raise UnauthenticatedError("Token has been revoked")
    except auth.InvalidIdTokenError:
        raise UnauthenticatedError("Invalid token")
    except Exception as e:
        logger.error(f"Token verification failed: {e}")
        raise UnauthenticatedError("Authentication failed")

    return TokenData(
        uid=decoded_token["uid"],
        email=decoded_token.get("email"),
        name=decoded_token.get("name"),
        email_verified=decoded_token.get("email_verified", False),
    )


def get_token_from_header(request: Request) -> str:
    """
    Extract Bearer token from Authorization header.

    Raises:
        UnauthenticatedError: If Authorization header is missing or invalid
    """
    auth_header = request.headers.get("Authorization")

    if not auth_header:
        raise UnauthenticatedError("User must be authenticated.")

    if not auth_header.startswith("Bearer "):
        raise UnauthenticatedError(
            "Invalid authorization header format. Expected 'Bearer <token>'"
        )

    return auth_header.split("Bearer ")[1]


async def _find_user(token_data: TokenData, db: AsyncSession) -> Optional[User]:
    """Look up by Firebase UID, falling back to email (re-linking the UID)."""
    result = await db.execute(select(User).where(User.firebase_uid == token_data.uid))
    user = result.scalar_one_or_none()

    if user is None and token_data.email:
        result = await db.execute(select(User).where(User.email == token_data.email))
        user = result.scalar_one_or_none()

        if user is not None:
            user.firebase_uid = token_data.uid
            await db.commit()

    return user


def _bind_user_context(user: User) -> None:
    user_id_var.set(str(user.id))
    set_user_context(user.id)


async def get_current_user(
    request: Request, db: AsyncSession = Depends(get_db)
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Raises:
        UnauthenticatedError: Missing or invalid token
        NotFoundError: The identity has no account yet
    """
    token = get_token_from_header(request)
    token_data = await verify_token_async(token)

    if not token_data.email:
        raise UnauthenticatedError("Email not found in token")

    user = await _find_user(token_data, db)
    if user is None:
        raise NotFoundError("User not found. Please register first.")

    _bind_user_context(user)
    return user


async def get_current_user_or_create(
    request: Request,
    client_ip: str = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    FastAPI dependency to get or provision the current authenticated user.

    Sets ``request.state.is_new_user`` so the login route can report it.

    Raises:
        UnauthenticatedError: Missing or invalid token
        PermissionDeniedError: The identity is new and its address is blocked
    """
    from app.services.account_service import account_service

    token = get_token_from_header(request)
    token_data = await verify_token_async(token)

    if not token_data.email:
        raise UnauthenticatedError("Email not found in token")

    user = await _find_user(token_data, db)
    request.state.is_new_user = user is None

    if user is None:
        user = await account_service.provision_user(
            firebase_uid=token_data.uid,
            email=token_data.email,
            name=token_data.name,
            ip_address=client_ip,
            db=db,
        )

    _bind_user_context(user)
    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """FastAPI dependency restricting a route to admins."""
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required.")
    return user


async def get_optional_user(
    request: Request, db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    FastAPI dependency to optionally get the current user.

    Returns None instead of raising when no valid token is provided.
    """
    auth_header = request.headers.get("Authorization")

    if not auth_header or not auth_header.startswith("Bearer "):
        return None

    try:
        token_data = await verify_token_async(auth_header.split("Bearer ")[1])
    except UnauthenticatedError:
        return None

    result = await db.execute(select(User).where(User.firebase_uid == token_data.uid))
    return result.scalar_one_or_none()
