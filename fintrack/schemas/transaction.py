from datetime import datetime
from typing import Optional
from pydantic import Field

from fintrack.schemas.base import CamelModel
from fintrack.schemas.allocation import TransactionType

DESCRIPTION_PATTERN = r"^[A-Za-z0-9 ]+$"


class TransactionCreate(CamelModel):
    allocation_id: str
    type: TransactionType
    amount: float = Field(..., ge=1)
    description: str = Field(..., min_length=5, max_length=50, pattern=DESCRIPTION_PATTERN)
    date: datetime


class TransactionUpdate(TransactionCreate):
    pass


class TransactionRead(CamelModel):
    id: str
    allocation_id: str
    allocation_name: Optional[str] = None
    type: TransactionType
    amount: float
    description: str
    date: datetime
