from pydantic_settings import BaseSettings

from app.utils.constants import (
    CACHE_RETENTION_HOURS,
    CACHE_TTL_MINUTES,
    DEFAULT_TRIAL_SEARCHES,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
)


class Settings(BaseSettings):
    # Database
    db_name: str = "business_finder_db"
    db_user: str = "postgres"
    db_password: str = ""
    db_host: str = "localhost"
    db_port: str = "5432"
    # Full async URL, overrides the db_* fields when set (e.g. sqlite+aiosqlite for tests)
    database_url: str = ""

    # Environment
    env: str = "development"
    debug: bool = True

    # Search pipeline
    trial_searches: int = DEFAULT_TRIAL_SEARCHES
    cache_ttl_minutes: int = CACHE_TTL_MINUTES
    cache_retention_hours: int = CACHE_RETENTION_HOURS
    cache_sweep_interval_hours: int = CACHE_RETENTION_HOURS

    # Rate limiting
    rate_limit_max_requests: int = RATE_LIMIT_MAX_REQUESTS
    rate_limit_window_seconds: int = RATE_LIMIT_WINDOW_SECONDS
    rate_limit_count_denied: bool = False

    @property
    def async_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        port = self.db_port if self.db_port and self.db_port != "None" else "5432"
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{port}/{self.db_name}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
