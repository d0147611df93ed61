"""Celery Beat schedule."""

from __future__ import annotations

from .config import scheduler_settings


def build_beat_schedule() -> dict:
    """Build the complete Celery Beat schedule."""
    return {
        # Keep assignment statuses in step with the clock.
        "advance-assignment-statuses": {
            "task": "agms_scheduler.tasks.advance_assignment_statuses",
            "schedule": scheduler_settings.assignment_status_interval,
        },
        "flag-due-maintenance": {
            "task": "agms_scheduler.tasks.flag_due_maintenance",
            "schedule": scheduler_settings.maintenance_check_interval,
        },
    }
