"""Utility modules for the business-finder backend."""

from app.utils.logger import logger, setup_logger
from app.utils.environment import is_production, is_staging, is_debug, get_environment
from app.utils.sentry_utils import configure_sentry, wrap_with_sentry
from app.utils.response_utils import error_response
from app.utils.constants import (
    API_VERSION,
    API_PREFIX,
    MIN_RADIUS_KM,
    MAX_RADIUS_KM,
    BUSINESS_TYPE_LABELS,
)

__all__ = [
    # Logger
    "logger",
    "setup_logger",
    # Environment
    "is_production",
    "is_staging",
    "is_debug",
    "get_environment",
    # Sentry
    "configure_sentry",
    "wrap_with_sentry",
    # Response
    "error_response",
    # Constants
    "API_VERSION",
    "API_PREFIX",
    "MIN_RADIUS_KM",
    "MAX_RADIUS_KM",
    "BUSINESS_TYPE_LABELS",
]
