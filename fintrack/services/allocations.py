import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from fintrack import crud
from fintrack.core.errors import NotFoundError, ValidationError
from fintrack.models.allocation import Allocation
from fintrack.schemas.allocation import AllocationCreate, AllocationUpdate, AllocationUsage
from fintrack.services.cache import (
    ALLOCATIONS, DASHBOARD, NOTIFICATIONS, REMINDERS, TRANSACTIONS, ResponseCache, cache_key,
)
from fintrack.utils.server_time import month_bounds, server_now

logger = logging.getLogger(__name__)

# transaction, reminder and notification rows render the allocation name
RENAME_AFFECTED = (ALLOCATIONS, DASHBOARD, TRANSACTIONS, REMINDERS, NOTIFICATIONS)


def budget_usage(allocation: Allocation, usage: float) -> dict:
    """Usage figures of an allocation for one month.

    Income buckets report how far the month is from the target; expense
    buckets cap usage at the budget.
    """
    if allocation.type == "income":
        left = max(allocation.budget - usage, 0)
        percentage = math.ceil(usage / allocation.budget * 100) if allocation.budget else 0
    else:
        capped = min(usage, allocation.budget)
        left = allocation.budget - capped
        percentage = math.ceil(capped / allocation.budget * 100) if allocation.budget else 0
    return AllocationUsage(
        id=allocation.id,
        name=allocation.name,
        budget=allocation.budget,
        type=allocation.type,
        budget_usage=usage,
        budget_left=left,
        percentage=percentage,
    ).to_json()


class AllocationService:
    def __init__(self, db: Session, cache: ResponseCache):
        self.db = db
        self.cache = cache

    def list(self, owner_id: str, month: int, page: int = 1, per_page: int = 10,
             search: Optional[str] = None) -> dict:
        key = cache_key(ALLOCATIONS, owner_id, "list", month, page, per_page, search)

        def load():
            rows, total = crud.allocation.list(self.db, owner_id=owner_id, page=page, per_page=per_page, search=search)
            start, end = month_bounds(month)
            usage = crud.allocation.usage(
                self.db, owner_id=owner_id, allocation_ids=[a.id for a in rows], start=start, end=end
            )
            return {
                "data": [budget_usage(a, usage.get(a.id, 0.0)) for a in rows],
                "page": page,
                "totalPage": math.ceil(total / per_page) if total else 0,
                "totalAllocations": total,
            }

        return self.cache.cached(key, ALLOCATIONS, load)

    def get(self, owner_id: str, allocation_id: str) -> dict:
        key = cache_key(ALLOCATIONS, owner_id, "detail", allocation_id)
        hit = self.cache.get_json(key)
        if hit is not None:
            return hit
        allocation = self._get(owner_id, allocation_id)
        start, end = month_bounds(server_now().month)
        usage = crud.allocation.usage(
            self.db, owner_id=owner_id, allocation_ids=[allocation.id], start=start, end=end
        )
        data = budget_usage(allocation, usage.get(allocation.id, 0.0))
        self.cache.set_json(key, data, ALLOCATIONS)
        return data

    def _get(self, owner_id: str, allocation_id: str) -> Allocation:
        allocation = crud.allocation.get(self.db, owner_id=owner_id, id=allocation_id)
        if not allocation:
            raise NotFoundError("Allocation not found.")
        return allocation

    def create(self, owner_id: str, obj_in: AllocationCreate) -> Allocation:
        if crud.allocation.get_by_name(self.db, owner_id=owner_id, name=obj_in.name):
            raise ValidationError("Allocation name already exists.")
        allocation = crud.allocation.create(self.db, owner_id=owner_id, obj_in=obj_in)
        self.cache.invalidate(owner_id, ALLOCATIONS, DASHBOARD)
        return allocation

    def update(self, owner_id: str, allocation_id: str, obj_in: AllocationUpdate) -> Allocation:
        allocation = self._get(owner_id, allocation_id)
        if allocation.name != obj_in.name and crud.allocation.get_by_name(
            self.db, owner_id=owner_id, name=obj_in.name, exclude_id=allocation.id
        ):
            raise ValidationError("Allocation with this name already exists.")
        allocation = crud.allocation.update(self.db, db_obj=allocation, obj_in=obj_in)
        self.cache.invalidate(owner_id, *RENAME_AFFECTED)
        return allocation

    def delete(self, owner_id: str, allocation_id: str) -> None:
        allocation = self._get(owner_id, allocation_id)
        crud.allocation.remove(self.db, db_obj=allocation)
        # transactions and reminders keep pointing at it and render a null name
        self.cache.invalidate(owner_id, *RENAME_AFFECTED)
        logger.info(f"Deleted allocation {allocation_id} for user {owner_id}")
