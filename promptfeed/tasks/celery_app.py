"""Celery application configuration."""

from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging

from promptfeed.config.settings import settings
from promptfeed.logging_config import configure_logging

celery_app = Celery(
    "promptfeed",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["promptfeed.tasks.idea_tasks"],
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.timezone,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=600,  # 10 minutes
    task_soft_time_limit=540,  # 9 minutes
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

# Scheduled tasks (beat)
celery_app.conf.beat_schedule = {
    "daily-build-ideas": {
        "task": "promptfeed.tasks.idea_tasks.generate_daily_ideas",
        "schedule": crontab(hour=settings.schedule_hour, minute=settings.schedule_minute),
    },
}


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging()
