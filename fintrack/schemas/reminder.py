"""
Reminder request and response bodies
"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from fintrack.schemas.base import CamelModel

TITLE_PATTERN = r"^[A-Za-z0-9 ]+$"


class ReminderCreate(CamelModel):
    allocation_id: str
    title: str = Field(..., min_length=5, max_length=50, pattern=TITLE_PATTERN)
    amount: float = Field(..., gt=0)
    due_date: datetime


class ReminderUpdate(CamelModel):
    """Partial update; omitted fields keep their stored value."""
    allocation_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=5, max_length=50, pattern=TITLE_PATTERN)
    amount: Optional[float] = Field(None, gt=0)
    due_date: Optional[datetime] = None


class ReminderRead(CamelModel):
    id: str
    allocation_id: str
    allocation_name: Optional[str] = None
    title: str
    amount: float
    due_date: datetime
