import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from fintrack import crud
from fintrack.core.errors import NotFoundError
from fintrack.models.notification import Notification
from fintrack.models.reminder import Reminder
from fintrack.schemas.notification import NotificationRead
from fintrack.services.cache import NOTIFICATIONS, ResponseCache, cache_key
from fintrack.utils.server_time import from_storage

logger = logging.getLogger(__name__)


def shape_notification(notification: Notification, reminder: Optional[Reminder],
                       allocation_name: Optional[str]) -> dict:
    """Response body of a notification. Fields taken from a deleted reminder come back as null."""
    return NotificationRead(
        id=notification.id,
        reminder_id=notification.reminder_id,
        reminder_title=reminder.title if reminder else None,
        allocation_name=allocation_name,
        amount=reminder.amount if reminder else None,
        due_date=from_storage(reminder.due_at) if reminder else None,
        status=notification.status,
        created_at=from_storage(notification.created_at),
    ).to_json()


class NotificationService:
    def __init__(self, db: Session, cache: ResponseCache):
        self.db = db
        self.cache = cache

    def list(self, owner_id: str, page: int = 1, per_page: int = 10) -> dict:
        key = cache_key(NOTIFICATIONS, owner_id, "list", page, per_page)

        def load():
            rows, total = crud.notification.list(self.db, owner_id=owner_id, page=page, per_page=per_page)
            return {
                "data": [shape_notification(n, r, name) for n, r, name in rows],
                "totalPage": math.ceil(total / per_page) if total else 0,
                "totalNotification": total,
                "unread": crud.notification.count_unread(self.db, owner_id=owner_id),
            }

        return self.cache.cached(key, NOTIFICATIONS, load)

    def _get(self, owner_id: str, notification_id: str) -> Notification:
        notification = crud.notification.get(self.db, owner_id=owner_id, id=notification_id)
        if not notification:
            raise NotFoundError("Notification not found.")
        return notification

    def mark_read(self, owner_id: str, notification_id: str) -> None:
        notification = self._get(owner_id, notification_id)
        crud.notification.mark_read(self.db, db_obj=notification)
        self.cache.invalidate(owner_id, NOTIFICATIONS)

    def delete(self, owner_id: str, notification_id: str) -> None:
        notification = self._get(owner_id, notification_id)
        crud.notification.remove(self.db, db_obj=notification)
        self.cache.invalidate(owner_id, NOTIFICATIONS)

    def bulk(self, owner_id: str, action: str) -> str:
        if action == "read":
            count = crud.notification.mark_all_read(self.db, owner_id=owner_id)
            message = "All notifications marked as read."
        else:
            count = crud.notification.remove_all(self.db, owner_id=owner_id)
            message = "All notifications deleted."
        self.cache.invalidate(owner_id, NOTIFICATIONS)
        logger.info(f"Bulk {action} on {count} notifications for user {owner_id}")
        return message
