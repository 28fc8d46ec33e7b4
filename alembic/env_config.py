"""
Environment configuration for Alembic migrations.
This module provides functions to get database URLs for different environments.
"""

import os

from dotenv import load_dotenv

# Get the environment from ENV variable, default to local
env = os.getenv("ENV", "local")
dotenv_file = f".env.{env}"

# Load environment variables from the appropriate .env file
print(f"Alembic: Loading environment variables from {dotenv_file}")
load_dotenv(dotenv_file)


def get_database_url(environment: str = None) -> str:
    """
    Get the synchronous database URL used to run migrations.

    Args:
        environment: The environment to get the URL for.
            Can be 'local', 'staging', 'production', or None (uses current ENV).

    Returns:
        str: The database URL. An async DATABASE_URL override is converted
        to its synchronous driver (asyncpg -> psycopg2, aiosqlite -> pysqlite).
    """
    if not environment:
        environment = os.getenv("ENV", "local")

    override = os.getenv("DATABASE_URL")
    if override:
        return (
            override.replace("postgresql+asyncpg://", "postgresql://")
            .replace("sqlite+aiosqlite://", "sqlite://")
        )

    db_user = os.getenv("DB_USER", "postgres")
    db_password = os.getenv("DB_PASSWORD", "")
    db_host = os.getenv("DB_HOST", "localhost")
    db_port = os.getenv("DB_PORT", "5432")
    db_name = os.getenv("DB_NAME", "business_finder_db")

    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"
