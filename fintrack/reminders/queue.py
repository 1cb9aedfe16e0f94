"""
Delayed delivery jobs for reminders.

One job is queued per (reminder, schedule version). The job id is derived from
both, so rescheduling never collides with a job already in flight and a stale
job can recognise itself when it fires.
"""
import logging

from celery import Celery

from .config import settings
from .metrics import reminders_scheduled_total, reminders_cancelled_total
from fintrack.core.errors import JobQueueError

logger = logging.getLogger(__name__)

DELIVER_TASK = "reminders.deliver"


def job_id_for(reminder_id: str, version: int) -> str:
    return f"reminder:{reminder_id}:{version}"


class ReminderJobQueue:
    def __init__(self, celery_app: Celery, queue_name: str = None):
        self.celery_app = celery_app
        self.queue_name = queue_name or settings.QUEUE_NAME

    def enqueue(self, reminder_id: str, version: int, delay_seconds: float) -> str:
        job_id = job_id_for(reminder_id, version)
        try:
            self.celery_app.send_task(
                DELIVER_TASK,
                kwargs={"reminder_id": str(reminder_id), "version": version},
                countdown=max(delay_seconds, 0),
                task_id=job_id,
                queue=self.queue_name,
            )
        except Exception as e:
            logger.error(f"Failed to enqueue {job_id}: {e}")
            raise JobQueueError() from e
        reminders_scheduled_total.inc()
        logger.info(f"Enqueued {job_id} to fire in {delay_seconds:.0f}s")
        return job_id

    def cancel(self, job_id: str) -> None:
        try:
            self.celery_app.control.revoke(job_id)
        except Exception as e:
            logger.error(f"Failed to revoke {job_id}: {e}")
            raise JobQueueError() from e
        reminders_cancelled_total.inc()
        logger.info(f"Revoked {job_id}")
