from datetime import datetime
from typing import Literal
from pydantic import Field

from fintrack.schemas.base import CamelModel

TransactionType = Literal["income", "expense"]
ALLOCATION_NAME_PATTERN = r"^[A-Za-z0-9 ]+$"


class AllocationCreate(CamelModel):
    name: str = Field(..., min_length=5, pattern=ALLOCATION_NAME_PATTERN)
    budget: float = Field(..., ge=1)
    type: TransactionType


class AllocationUpdate(AllocationCreate):
    pass


class AllocationRead(CamelModel):
    id: str
    name: str
    budget: float
    type: TransactionType
    created_at: datetime
    updated_at: datetime


class AllocationUsage(CamelModel):
    """List row: an allocation with its usage for the requested month."""
    id: str
    name: str
    budget: float
    type: TransactionType
    budget_usage: float
    budget_left: float
    percentage: int
