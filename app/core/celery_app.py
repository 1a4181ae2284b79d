"""Celery application configuration"""

from celery import Celery
from kombu import Exchange, Queue
from app.core.config import settings

# Create Celery app
celery_app = Celery(
    "orderservice",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "app.tasks.outbox_tasks"
    ]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.CELERY_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,  # 5 minutes
    task_soft_time_limit=4 * 60,  # 4 minutes
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,

    # Task routing
    task_routes={
        "app.tasks.outbox_tasks.*": {"queue": "outbox"}
    },

    # Retry configuration
    task_default_retry_delay=60,  # 1 minute
    task_max_retries=3,

    # Result backend configuration
    result_expires=3600,  # 1 hour
)

# Define queues
celery_app.conf.task_queues = (
    Queue("default", Exchange("default"), routing_key="default"),
    Queue("outbox", Exchange("outbox"), routing_key="outbox"),
)

# Beat schedule for periodic tasks
celery_app.conf.beat_schedule = {
    "relay-outbox-events": {
        "task": "relay_outbox_events",
        "schedule": settings.OUTBOX_RELAY_INTERVAL_SECONDS,
        "options": {"queue": "outbox", "expires": settings.OUTBOX_RELAY_INTERVAL_SECONDS * 2}
    },
}
