from datetime import datetime
from typing import Literal, Optional

from fintrack.schemas.base import CamelModel


class NotificationRead(CamelModel):
    id: str
    reminder_id: str
    reminder_title: Optional[str] = None
    allocation_name: Optional[str] = None
    amount: Optional[float] = None
    due_date: Optional[datetime] = None
    status: Literal["unread", "read"]
    created_at: datetime


class NotificationBulkAction(CamelModel):
    action: Literal["read", "delete"]
