"""Scheduler configuration via environment variables."""

from pydantic_settings import BaseSettings


class SchedulerSettings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = {"env_prefix": "SCHEDULER_"}

    # Celery
    celery_broker_url: str = "redis://localhost:6379/1"
    celery_result_backend: str = "redis://localhost:6379/2"

    # Schedule intervals (seconds)
    assignment_status_interval: int = 60
    maintenance_check_interval: int = 3600  # 1 hour

    log_level: str = "INFO"


scheduler_settings = SchedulerSettings()
