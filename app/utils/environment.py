"""Environment detection utilities."""

import os
from enum import Enum


class Environment(str, Enum):
    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"


def get_environment() -> Environment:
    """Get the current environment from ENV (defaults to local).

    Unknown values are treated as local so a typo never enables
    production-only behaviour such as Sentry reporting.
    """
    try:
        return Environment(os.getenv("ENV", "local").lower())
    except ValueError:
        return Environment.LOCAL


def is_production() -> bool:
    return get_environment() is Environment.PRODUCTION


def is_staging() -> bool:
    return get_environment() is Environment.STAGING


def is_debug() -> bool:
    """True for local and test runs (verbose logging, auto-reload, no Sentry)."""
    return get_environment() in (Environment.LOCAL, Environment.TEST)


def is_deployed() -> bool:
    return is_production() or is_staging()
