"""
Celery application configuration.
"""

from celery import Celery
from celery.schedules import crontab

from schoolpay.config import settings

celery_app = Celery(
    "schoolpay",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "schoolpay.workers.orphaned_orders",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="Asia/Kolkata",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)

celery_app.conf.beat_schedule = {
    # Orders left without a status record by failed creation calls
    "hourly-orphaned-order-report": {
        "task": "schoolpay.workers.orphaned_orders.report_orphaned_orders",
        "schedule": crontab(minute=15, hour="*"),
    },
}
