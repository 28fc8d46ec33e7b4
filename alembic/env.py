"""Alembic migration environment for the business-finder schema"""

import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine

# Project root and this directory on the path so app and env_config import
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
from env_config import get_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Registers users, search history, cache, IP usage and rate limit tables
from app.db.database import Base
from app.models import *  # noqa: F401, F403

target_metadata = Base.metadata


def include_object(object, name, type_, reflected, compare_to):
    """Skip tables that exist in the database but have no model."""
    if compare_to is None and type_ == "table":
        return False
    return True


def _configure_kwargs(url: str) -> dict:
    # SQLite cannot ALTER most constraints in place
    return {
        "target_metadata": target_metadata,
        "include_object": include_object,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit migration SQL to the script output without a live connection."""
    url = get_database_url(os.getenv("ENV"))

    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against the configured database."""
    db_url = get_database_url(os.getenv("ENV"))
    engine = create_engine(db_url)

    with engine.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs(db_url))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
