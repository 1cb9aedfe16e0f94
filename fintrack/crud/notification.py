from typing import List, Optional, Tuple
from sqlalchemy import update
from sqlalchemy.orm import Session

from fintrack.models.allocation import Allocation
from fintrack.models.notification import Notification, NOTIFICATION_READ, NOTIFICATION_UNREAD
from fintrack.models.reminder import Reminder


class CRUDNotification:
    def get(self, db: Session, *, owner_id: str, id: str) -> Optional[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.id == id, Notification.owner_id == owner_id)
            .first()
        )

    def get_by_job_id(self, db: Session, *, job_id: str) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.job_id == job_id).first()

    def create(self, db: Session, *, owner_id: str, reminder_id: str, job_id: Optional[str] = None) -> Notification:
        db_obj = Notification(
            owner_id=owner_id,
            reminder_id=reminder_id,
            status=NOTIFICATION_UNREAD,
            job_id=job_id,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def list(self, db: Session, *, owner_id: str, page: int = 1, per_page: int = 10) -> Tuple[List, int]:
        """Notifications newest first, joined with whatever is left of their reminder."""
        query = (
            db.query(Notification, Reminder, Allocation.name)
            .outerjoin(Reminder, Reminder.id == Notification.reminder_id)
            .outerjoin(Allocation, Allocation.id == Reminder.allocation_id)
            .filter(Notification.owner_id == owner_id)
        )
        total = query.count()
        rows = (
            query.order_by(Notification.created_at.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return rows, total

    def count_unread(self, db: Session, *, owner_id: str) -> int:
        return (
            db.query(Notification)
            .filter(Notification.owner_id == owner_id, Notification.status == NOTIFICATION_UNREAD)
            .count()
        )

    def mark_read(self, db: Session, *, db_obj: Notification) -> Notification:
        db_obj.status = NOTIFICATION_READ
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def mark_all_read(self, db: Session, *, owner_id: str) -> int:
        result = db.execute(
            update(Notification)
            .where(Notification.owner_id == owner_id, Notification.status == NOTIFICATION_UNREAD)
            .values(status=NOTIFICATION_READ)
        )
        db.commit()
        return result.rowcount

    def remove(self, db: Session, *, db_obj: Notification) -> None:
        db.delete(db_obj)
        db.commit()

    def remove_all(self, db: Session, *, owner_id: str) -> int:
        count = (
            db.query(Notification)
            .filter(Notification.owner_id == owner_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return count


notification = CRUDNotification()
