"""
Reminder model - a scheduled bill reminder that fires one notification
"""
from datetime import datetime
import uuid
from sqlalchemy import Column, String, DateTime, Float, Integer, ForeignKey, Index
from fintrack.db.base_class import Base


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    allocation_id = Column(String(36), nullable=False, index=True)
    title = Column(String(50), nullable=False)
    amount = Column(Float, nullable=False)
    due_at = Column(DateTime, nullable=False, index=True)  # UTC-naive

    # Bumped on every reschedule; a fired job carries the version it was queued for
    schedule_version = Column(Integer, nullable=False, default=1)
    # Job expected to fire; NULL while a reschedule is in flight or after a failed enqueue
    job_id = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_reminders_identity", "owner_id", "allocation_id", "title", "amount", "due_at"),
    )
