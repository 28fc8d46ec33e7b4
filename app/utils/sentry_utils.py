"""Sentry error tracking utilities."""

import functools
import os
from typing import Any, Callable, TypeVar

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from app.utils.environment import is_deployed, get_environment

F = TypeVar("F", bound=Callable[..., Any])

_sentry_initialized = False


def configure_sentry(dsn_env_var: str = "SENTRY_DSN") -> bool:
    """Initialize Sentry for error tracking.

    Only initializes in deployed environments (staging/production) and
    when the DSN environment variable is set.

    Returns:
        True if Sentry was initialized, False otherwise
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    if not is_deployed():
        return False

    dsn = os.getenv(dsn_env_var)
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=get_environment().value,
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.2")),
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        # Email addresses and client IPs stay out of Sentry
        send_default_pii=False,
    )

    _sentry_initialized = True
    return True


def capture_exception(exception: Exception) -> None:
    """Send an exception to Sentry (no-op when Sentry is not configured)."""
    if not _sentry_initialized:
        return
    sentry_sdk.capture_exception(exception)


def set_user_context(user_id: int | str) -> None:
    """Tag subsequent Sentry events with the authenticated user's id."""
    if not _sentry_initialized:
        return
    sentry_sdk.set_user({"id": str(user_id)})


def wrap_with_sentry(func: F) -> F:
    """Decorator for background coroutines so their failures reach Sentry."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            capture_exception(e)
            raise

    return wrapper  # type: ignore
