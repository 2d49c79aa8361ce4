"""Celery application configuration."""

from celery import Celery

from last_leaf.config import get_settings

settings = get_settings()

app = Celery(
    "last_leaf",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["last_leaf.tasks.inactivity"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # 4 minutes soft limit
    beat_schedule={
        "check-inactive-users": {
            "task": "last_leaf.tasks.inactivity.check_inactive_users",
            "schedule": settings.inactivity_check_minutes * 60,
        },
    },
)
