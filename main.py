import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment-specific .env file BEFORE any app imports
env = os.getenv("ENV", "local")
dotenv_file = f".env.{env}"
load_dotenv(dotenv_file)

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.middleware import RequestContextMiddleware
from app.utils import (
    logger,
    configure_sentry,
    error_response,
    is_debug,
    API_PREFIX,
    API_VERSION,
)
from app.utils.errors import AppError
from app.utils.response_utils import app_error_handler, validation_error_handler
from app.utils.sentry_utils import capture_exception
from app.routers import (
    auth_router,
    users_router,
    search_router,
    rate_limit_router,
    admin_router,
)
from app.services.scheduler import scheduler_service

# Initialize Sentry for error tracking (only in deployed environments)
sentry_enabled = configure_sentry()
if sentry_enabled:
    logger.info("Sentry error tracking initialized")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    logger.info("Starting background scheduler...")
    await scheduler_service.start()

    yield

    # Shutdown
    logger.info("Stopping background scheduler...")
    await scheduler_service.stop()


app = FastAPI(
    title="Business Finder Backend",
    description="Local business search with trial quotas and admin moderation",
    version=API_VERSION,
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# CORS configuration - allow all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Client IP resolution and slow request logging
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# Register routers
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(search_router, prefix=API_PREFIX)
app.include_router(rate_limit_router, prefix=API_PREFIX)
app.include_router(admin_router, prefix=API_PREFIX)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(
        f"Unhandled exception: {exc.__class__.__name__}: {exc}",
        exc_info=True,
    )

    # Capture exception to Sentry
    capture_exception(exc)

    return error_response(
        code="INTERNAL",
        message="An unexpected error occurred",
        status_code=500,
    )


@app.get("/")
async def root():
    return {"message": "Welcome to Business Finder API", "version": API_VERSION}


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint."""
    try:
        await db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "disconnected"

    return {
        "status": "healthy",
        "database": db_status,
        "scheduler": "running" if scheduler_service.is_running else "stopped",
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting Business Finder Backend (env={env}, debug={is_debug()})")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=is_debug())
