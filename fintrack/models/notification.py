from datetime import datetime
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from fintrack.db.base_class import Base


NOTIFICATION_UNREAD = "unread"
NOTIFICATION_READ = "read"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # No FK: a notification survives the deletion of its reminder
    reminder_id = Column(String(36), nullable=False, index=True)
    status = Column(String(10), nullable=False, default=NOTIFICATION_UNREAD)
    # Job that produced it; redelivery of the same job reuses the row
    job_id = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_notifications_owner_created", "owner_id", "created_at"),
    )
