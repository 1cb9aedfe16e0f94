from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import update
from sqlalchemy.orm import Session

from fintrack.models.allocation import Allocation
from fintrack.models.reminder import Reminder


def get_reminder(db: Session, reminder_id: str) -> Optional[Reminder]:
    return db.get(Reminder, reminder_id)


def get_owned_reminder(db: Session, reminder_id: str, owner_id: str) -> Optional[Reminder]:
    return (
        db.query(Reminder)
        .filter(Reminder.id == reminder_id, Reminder.owner_id == owner_id)
        .first()
    )


def find_identical(
    db: Session,
    owner_id: str,
    allocation_id: str,
    title: str,
    amount: float,
    due_at: datetime,
    exclude_id: Optional[str] = None,
) -> Optional[Reminder]:
    query = db.query(Reminder).filter(
        Reminder.owner_id == owner_id,
        Reminder.allocation_id == allocation_id,
        Reminder.title == title,
        Reminder.amount == amount,
        Reminder.due_at == due_at,
    )
    if exclude_id:
        query = query.filter(Reminder.id != exclude_id)
    return query.first()


def create_reminder(db: Session, owner_id: str, allocation_id: str, title: str, amount: float, due_at: datetime) -> Reminder:
    reminder = Reminder(
        owner_id=owner_id,
        allocation_id=allocation_id,
        title=title,
        amount=amount,
        due_at=due_at,
        schedule_version=1,
    )
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    return reminder


def reschedule(db: Session, reminder_id: str, expected_version: int, values: dict) -> bool:
    """Apply ``values`` and bump the schedule version, only if nobody else bumped it first."""
    result = db.execute(
        update(Reminder)
        .where(Reminder.id == reminder_id, Reminder.schedule_version == expected_version)
        .values(
            **values,
            schedule_version=expected_version + 1,
            job_id=None,
            updated_at=datetime.utcnow(),
        )
    )
    db.commit()
    return result.rowcount == 1


def set_job_id(db: Session, reminder_id: str, version: int, job_id: Optional[str]) -> bool:
    result = db.execute(
        update(Reminder)
        .where(Reminder.id == reminder_id, Reminder.schedule_version == version)
        .values(job_id=job_id)
    )
    db.commit()
    return result.rowcount == 1


def delete_reminder(db: Session, reminder: Reminder) -> None:
    db.delete(reminder)
    db.commit()


def list_reminders(
    db: Session,
    owner_id: str,
    page: int = 1,
    per_page: int = 10,
    search: Optional[str] = None,
    allocation_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Tuple[List[Tuple[Reminder, Optional[str]]], int]:
    query = (
        db.query(Reminder, Allocation.name)
        .outerjoin(Allocation, Allocation.id == Reminder.allocation_id)
        .filter(Reminder.owner_id == owner_id)
    )
    if search:
        query = query.filter(Reminder.title.ilike(f"%{search}%"))
    if allocation_id:
        query = query.filter(Reminder.allocation_id == allocation_id)
    if start is not None and end is not None:
        query = query.filter(Reminder.due_at >= start, Reminder.due_at < end)
    total = query.count()
    rows = (
        query.order_by(Reminder.title.asc(), Reminder.due_at.asc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return rows, total
