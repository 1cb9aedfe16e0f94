"""
Reminder lifecycle: create, reschedule and delete reminders while keeping
exactly one pending delivery job per reminder.
"""
import logging
import math
from datetime import datetime
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from fintrack import crud
from fintrack.crud import reminder as repository
from fintrack.core.errors import ConflictError, JobQueueError, ReminderNotFound, ValidationError
from fintrack.models.reminder import Reminder
from fintrack.schemas.reminder import ReminderRead, ReminderUpdate
from fintrack.services.cache import ResponseCache, NOTIFICATIONS, REMINDERS, cache_key
from fintrack.utils.server_time import from_storage, month_bounds, seconds_until, server_now, to_server_time, to_storage
from .queue import ReminderJobQueue

logger = logging.getLogger(__name__)


class ReminderScheduler:
    def __init__(
        self,
        db: Session,
        job_queue: ReminderJobQueue,
        cache: ResponseCache,
        clock: Callable[[], datetime] = server_now,
    ):
        self.db = db
        self.job_queue = job_queue
        self.cache = cache
        self.clock = clock

    # --- writes ---

    def create(self, owner_id: str, allocation_id: str, title: str, amount: float,
               due_date: datetime) -> Tuple[Reminder, bool]:
        """Persist and schedule a reminder. Returns ``(reminder, created)``; an identical
        existing reminder is returned as-is with ``created=False``."""
        now = self.clock()
        due = self._require_future(due_date, now)
        self._require_allocation(owner_id, allocation_id)

        due_at = to_storage(due)
        existing = repository.find_identical(self.db, owner_id, allocation_id, title, amount, due_at)
        if existing:
            if existing.job_id is None:
                # an earlier enqueue failed; retrying the request repairs it
                self._schedule(existing, due, now)
            return existing, False

        reminder = repository.create_reminder(self.db, owner_id, allocation_id, title, amount, due_at)
        self.cache.invalidate(owner_id, REMINDERS)
        self._schedule(reminder, due, now)
        logger.info(f"Created reminder {reminder.id} for user {owner_id} due {due.isoformat()}")
        return reminder, True

    def update(self, reminder_id: str, owner_id: str, fields: ReminderUpdate) -> bool:
        """Apply changed fields and reschedule. Returns False when nothing changed."""
        reminder = repository.get_owned_reminder(self.db, reminder_id, owner_id)
        if not reminder:
            raise ReminderNotFound()

        now = self.clock()
        if fields.due_date is not None:
            due = self._require_future(fields.due_date, now)
        else:
            due = self._require_future(from_storage(reminder.due_at), now)

        candidate = {
            "allocation_id": fields.allocation_id or reminder.allocation_id,
            "title": fields.title if fields.title is not None else reminder.title,
            "amount": fields.amount if fields.amount is not None else reminder.amount,
            "due_at": to_storage(due),
        }
        changes = {k: v for k, v in candidate.items() if getattr(reminder, k) != v}

        if not changes:
            if reminder.job_id is None:
                self._schedule(reminder, due, now)
            return False

        if "allocation_id" in changes:
            self._require_allocation(owner_id, changes["allocation_id"])

        clash = repository.find_identical(self.db, owner_id, exclude_id=reminder.id, **candidate)
        if clash:
            raise ConflictError("An identical reminder already exists for the new due date.")

        old_job_id = reminder.job_id
        version = reminder.schedule_version
        if not repository.reschedule(self.db, reminder.id, version, changes):
            raise ConflictError("Reminder was modified by another request, please retry.")
        self.db.refresh(reminder)

        self.cache.invalidate(owner_id, REMINDERS, NOTIFICATIONS)
        if old_job_id:
            self._cancel(old_job_id)
        self._schedule(reminder, due, now)
        logger.info(f"Rescheduled reminder {reminder.id} to version {reminder.schedule_version}")
        return True

    def delete(self, reminder_id: str, owner_id: str) -> None:
        reminder = repository.get_owned_reminder(self.db, reminder_id, owner_id)
        if not reminder:
            raise ReminderNotFound()
        job_id = reminder.job_id
        repository.delete_reminder(self.db, reminder)
        self.cache.invalidate(owner_id, REMINDERS, NOTIFICATIONS)
        if job_id:
            self._cancel(job_id)
        logger.info(f"Deleted reminder {reminder_id} for user {owner_id}")

    # --- reads ---

    def list(self, owner_id: str, page: int = 1, per_page: int = 10, search: Optional[str] = None,
             allocation_id: Optional[str] = None, month: Optional[int] = None) -> dict:
        if allocation_id == "All":
            allocation_id = None
        key = cache_key(REMINDERS, owner_id, "list", allocation_id, search, month, page, per_page)

        def load():
            start, end = month_bounds(month) if month else (None, None)
            rows, total = repository.list_reminders(
                self.db, owner_id, page=page, per_page=per_page, search=search,
                allocation_id=allocation_id, start=start, end=end,
            )
            return {
                "data": [self._shape(reminder, allocation_name) for reminder, allocation_name in rows],
                "totalPage": math.ceil(total / per_page) if total else 0,
                "totalReminder": total,
            }

        return self.cache.cached(key, REMINDERS, load)

    def get(self, owner_id: str, reminder_id: str) -> dict:
        key = cache_key(REMINDERS, owner_id, "detail", reminder_id)
        hit = self.cache.get_json(key)
        if hit is not None:
            return hit
        reminder = repository.get_owned_reminder(self.db, reminder_id, owner_id)
        if not reminder:
            raise ReminderNotFound()
        allocation = crud.allocation.get(self.db, owner_id=owner_id, id=reminder.allocation_id)
        data = self._shape(reminder, allocation.name if allocation else None)
        self.cache.set_json(key, data, REMINDERS)
        return data

    # --- helpers ---

    @staticmethod
    def _shape(reminder: Reminder, allocation_name: Optional[str]) -> dict:
        return ReminderRead(
            id=reminder.id,
            allocation_id=reminder.allocation_id,
            allocation_name=allocation_name,
            title=reminder.title,
            amount=reminder.amount,
            due_date=from_storage(reminder.due_at),
        ).to_json()

    @staticmethod
    def _require_future(due_date: datetime, now: datetime) -> datetime:
        due = to_server_time(due_date)
        if due <= now:
            raise ValidationError("Due date must be in the future.")
        return due

    def _require_allocation(self, owner_id: str, allocation_id: str) -> None:
        if not crud.allocation.get(self.db, owner_id=owner_id, id=allocation_id):
            raise ValidationError("Allocation not found.")

    def _schedule(self, reminder: Reminder, due: datetime, now: datetime) -> str:
        version = reminder.schedule_version
        job_id = self.job_queue.enqueue(reminder.id, version, seconds_until(due, now))
        if not repository.set_job_id(self.db, reminder.id, version, job_id):
            logger.warning(f"Reminder {reminder.id} moved past version {version} before its job id was recorded")
        self.db.refresh(reminder)
        return job_id

    def _cancel(self, job_id: str) -> None:
        # a job that escapes revocation fires with an old version and is skipped
        try:
            self.job_queue.cancel(job_id)
        except JobQueueError:
            logger.warning(f"Could not revoke {job_id}; it will be ignored when it fires")
