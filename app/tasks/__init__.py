from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_shutdown

from app.config import get_settings
from app.utils.async_celery import cleanup_event_loop

settings = get_settings()

celery_app = Celery(
    "tennis_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks.sync_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.celery_timezone,
    enable_utc=True,
)

celery_app.conf.beat_schedule = {
    "fetch-rankings-daily": {
        "task": "app.tasks.sync_tasks.fetch_rankings",
        "schedule": crontab(hour=6, minute=0),
    },
    "fetch-recent-matches-every-6h": {
        "task": "app.tasks.sync_tasks.fetch_recent_matches",
        "schedule": crontab(minute=15, hour="*/6"),
    },
    "fetch-upcoming-matches-every-2h": {
        "task": "app.tasks.sync_tasks.fetch_upcoming_matches",
        "schedule": crontab(minute=30, hour="*/2"),
    },
}


@worker_shutdown.connect
def _close_shared_loop(**kwargs):
    cleanup_event_loop()
