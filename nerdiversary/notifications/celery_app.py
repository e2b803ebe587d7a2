import logging

from celery import Celery
from .config import settings


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

broker_url = settings.CELERY_BROKER_URL
result_backend = settings.CELERY_RESULT_BACKEND or None

celery_app = Celery(
    "nerdiversary",
    broker=broker_url,
    backend=result_backend,
)

celery_app.conf.update(
    task_acks_late=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.WORKER_CONCURRENCY,
    timezone="UTC",
    enable_utc=True,
    include=["nerdiversary.notifications.tasks"],
)

# Celery Beat schedule for the scheduler tick
celery_app.conf.beat_schedule = {
    "nerdiversary-tick": {
        "task": "nerdiversary.tick",
        "schedule": settings.TICK_INTERVAL_SECONDS,
        # A tick older than one interval is superseded by the next one
        "options": {"expires": settings.TICK_INTERVAL_SECONDS},
    },
}

# Ensure tasks are registered when worker starts
from . import tasks as _tasks  # noqa: F401,E402
