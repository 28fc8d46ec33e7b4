"""In-process scheduler for the cache and rate-limit log sweeps."""

from app.services.scheduler.scheduler_service import SchedulerService, scheduler_service

__all__ = ["SchedulerService", "scheduler_service"]
