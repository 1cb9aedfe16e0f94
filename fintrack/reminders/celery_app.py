from celery import Celery
from kombu import Exchange, Queue
from .config import settings


celery_app = Celery(
    "reminders",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND or None,
)

exchange = Exchange(settings.QUEUE_NAME, type="direct", durable=True)

celery_app.conf.update(
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_ignore_result=True,
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.WORKER_CONCURRENCY,
    task_default_queue=settings.QUEUE_NAME,
    task_default_exchange=settings.QUEUE_NAME,
    task_default_routing_key=settings.QUEUE_NAME,
    include=["fintrack.reminders.tasks"],
    task_queues=(
        Queue(settings.QUEUE_NAME, exchange=exchange, routing_key=settings.QUEUE_NAME, durable=True),
    ),
    # Delayed jobs sit unacked on a redis broker until their ETA; keep the
    # visibility window above the longest expected delay
    broker_transport_options={"visibility_timeout": 60 * 60 * 24 * 31},
)
