from celery import Task
from celery.signals import worker_process_shutdown
from celery.utils.log import get_task_logger

from fintrack.db.session import SessionLocal
from .celery_app import celery_app
from .config import settings
from .metrics import notifications_dropped_total
from .queue import DELIVER_TASK
from .worker import NotificationWorker

logger = get_task_logger(__name__)


class DeliveryTask(Task):
    """Task base holding the per-process redis collaborators."""

    _services = None

    @property
    def services(self):
        if self._services is None:
            from fintrack.core.services import WorkerServices
            DeliveryTask._services = WorkerServices.from_settings()
        return self._services


@celery_app.task(
    name=DELIVER_TASK,
    bind=True,
    base=DeliveryTask,
    max_retries=settings.JOB_ATTEMPTS - 1,
    default_retry_delay=settings.JOB_BACKOFF_SECONDS,
)
def deliver_reminder_task(self, reminder_id: str, version: int = None):
    """Fire a reminder. Retried with a fixed backoff; dropped after the last attempt."""
    db = SessionLocal()
    try:
        worker = NotificationWorker(db, self.services.cache, self.services.publisher)
        notification = worker.deliver(reminder_id, version, job_id=self.request.id)
        return notification.id if notification else None
    except Exception as exc:
        attempt = self.request.retries + 1
        if self.request.retries >= self.max_retries:
            notifications_dropped_total.inc()
            logger.error(
                f"Dropping job {self.request.id} for reminder {reminder_id} "
                f"after {attempt} attempts: {exc}"
            )
            raise
        logger.warning(
            f"Delivery of reminder {reminder_id} failed on attempt {attempt}/{settings.JOB_ATTEMPTS}: {exc}"
        )
        raise self.retry(exc=exc, countdown=settings.JOB_BACKOFF_SECONDS)
    finally:
        db.close()


@worker_process_shutdown.connect
def close_worker_services(**kwargs):
    if DeliveryTask._services is not None:
        DeliveryTask._services.close()
        DeliveryTask._services = None
