"""
Handler run when a reminder's delivery job fires.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fintrack import crud
from fintrack.crud import reminder as repository
from fintrack.core.errors import ReminderNotFound
from fintrack.core.security import room_id_for
from fintrack.models.notification import Notification
from fintrack.services.cache import NOTIFICATIONS, ResponseCache
from fintrack.services.notifications import shape_notification
from .metrics import notifications_delivered_total, notifications_stale_total
from .queue import job_id_for

logger = logging.getLogger(__name__)

NEW_NOTIFICATION_EVENT = "newNotification"


class NotificationWorker:
    def __init__(self, db: Session, cache: ResponseCache, publisher):
        self.db = db
        self.cache = cache
        # anything with publish(room_id, event, payload)
        self.publisher = publisher

    def deliver(self, reminder_id: str, version: Optional[int] = None,
                job_id: Optional[str] = None) -> Optional[Notification]:
        """Create the notification for a fired reminder and push it to the owner's room.

        Returns None for a job made stale by a later reschedule. Raises
        ReminderNotFound when the reminder no longer exists so the job is retried.
        """
        reminder = repository.get_reminder(self.db, reminder_id)
        if reminder is None:
            raise ReminderNotFound(f"Reminder {reminder_id} not found.")

        if version is not None and version != reminder.schedule_version:
            notifications_stale_total.inc()
            logger.info(
                f"Skipping stale job for reminder {reminder_id}: "
                f"version {version}, current {reminder.schedule_version}"
            )
            return None

        job_id = job_id or job_id_for(reminder_id, reminder.schedule_version)
        notification = crud.notification.get_by_job_id(self.db, job_id=job_id)
        if notification is None:
            try:
                notification = crud.notification.create(
                    self.db, owner_id=reminder.owner_id, reminder_id=reminder.id, job_id=job_id
                )
            except IntegrityError:
                # a concurrent redelivery of the same job won the insert
                self.db.rollback()
                notification = crud.notification.get_by_job_id(self.db, job_id=job_id)
                if notification is None:
                    raise
        else:
            logger.info(f"Job {job_id} redelivered, reusing notification {notification.id}")

        self.cache.invalidate(reminder.owner_id, NOTIFICATIONS)

        allocation = crud.allocation.get(self.db, owner_id=reminder.owner_id, id=reminder.allocation_id)
        payload = shape_notification(notification, reminder, allocation.name if allocation else None)
        self.publisher.publish(room_id_for(reminder.owner_id), NEW_NOTIFICATION_EVENT, payload)

        notifications_delivered_total.inc()
        logger.info(f"Delivered notification {notification.id} for reminder {reminder_id}")
        return notification
