"""Celery application running periodic gate and fleet housekeeping."""

from __future__ import annotations

import logging

from celery import Celery
from celery.signals import after_setup_logger

from .config import scheduler_settings

app = Celery(
    "agms_scheduler",
    broker=scheduler_settings.celery_broker_url,
    backend=scheduler_settings.celery_result_backend,
    include=["agms_scheduler.tasks"],
)

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
)


@after_setup_logger.connect
def _set_log_level(logger: logging.Logger, **kwargs: object) -> None:
    logger.setLevel(scheduler_settings.log_level)


def configure_beat() -> None:
    """Install the periodic task schedule."""
    from .beat_schedule import build_beat_schedule

    app.conf.beat_schedule = build_beat_schedule()


configure_beat()
