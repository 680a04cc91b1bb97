from celery import Celery
from hostpanel.config import settings

celery_app = Celery(
    "hostpanel",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND
)

celery_app.conf.broker_connection_retry_on_startup = True

celery_app.conf.task_routes = {
    "hostpanel.tasks.*": {"queue": "celery"}
}

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
)

# Periodic debugger sweep; only reports, never retries on its own
celery_app.conf.beat_schedule = {
    "sweep-stuck-items": {
        "task": "hostpanel.tasks.reconcile_tasks.sweep_stuck_items",
        "schedule": float(settings.RECONCILE_SWEEP_INTERVAL),
    },
}

celery_app.autodiscover_tasks(["hostpanel.tasks"])

import hostpanel.tasks.reconcile_tasks  # noqa: F401, E402
