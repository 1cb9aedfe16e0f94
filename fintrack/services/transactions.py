import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from fintrack import crud
from fintrack.core.errors import NotFoundError, ValidationError
from fintrack.models.transaction import Transaction
from fintrack.schemas.transaction import TransactionCreate, TransactionRead, TransactionUpdate
from fintrack.services.cache import ALLOCATIONS, DASHBOARD, TRANSACTIONS, ResponseCache, cache_key
from fintrack.utils.server_time import from_storage, month_bounds, to_server_time, to_storage

logger = logging.getLogger(__name__)

# every write moves allocation usage and the dashboard totals too
AFFECTED_RESOURCES = (TRANSACTIONS, ALLOCATIONS, DASHBOARD)


def shape_transaction(transaction: Transaction, allocation_name: Optional[str]) -> dict:
    return TransactionRead(
        id=transaction.id,
        allocation_id=transaction.allocation_id,
        allocation_name=allocation_name,
        type=transaction.type,
        amount=transaction.amount,
        description=transaction.description,
        date=from_storage(transaction.date),
    ).to_json()


class TransactionService:
    def __init__(self, db: Session, cache: ResponseCache):
        self.db = db
        self.cache = cache

    def list(self, owner_id: str, page: int = 1, per_page: int = 10, search: Optional[str] = None,
             allocation_id: Optional[str] = None, month: Optional[int] = None,
             type: Optional[str] = None) -> dict:
        allocation_id = None if allocation_id in (None, "", "All") else allocation_id
        type = None if type in (None, "", "All") else type
        key = cache_key(TRANSACTIONS, owner_id, "list", allocation_id, search, month, type, page, per_page)

        def load():
            start, end = month_bounds(month) if month else (None, None)
            rows, total = crud.transaction.list(
                self.db, owner_id=owner_id, page=page, per_page=per_page, search=search,
                allocation_id=allocation_id, type=type, start=start, end=end,
            )
            return {
                "data": [shape_transaction(t, name) for t, name in rows],
                "totalPage": math.ceil(total / per_page) if total else 0,
                "totalTransaction": total,
            }

        return self.cache.cached(key, TRANSACTIONS, load)

    def get(self, owner_id: str, transaction_id: str) -> dict:
        key = cache_key(TRANSACTIONS, owner_id, "detail", transaction_id)

        def load():
            row = crud.transaction.get_with_allocation(self.db, owner_id=owner_id, id=transaction_id)
            if not row:
                raise NotFoundError("Transaction not found.")
            return shape_transaction(*row)

        return self.cache.cached(key, TRANSACTIONS, load)

    def _check_budget(self, owner_id: str, values: dict, exclude_id: str = None) -> None:
        allocation = crud.allocation.get(self.db, owner_id=owner_id, id=values["allocation_id"])
        if not allocation or allocation.type != values["type"]:
            raise ValidationError("Allocation not found or not matched with this transaction.")
        if values["type"] != "expense":
            return
        date = from_storage(values["date"])
        start, end = month_bounds(date.month, date.year)
        spent = crud.allocation.usage(
            self.db, owner_id=owner_id, allocation_ids=[allocation.id], start=start, end=end,
            exclude_transaction_id=exclude_id,
        ).get(allocation.id, 0.0)
        if spent + values["amount"] > allocation.budget:
            raise ValidationError("Insufficient budget for this transaction.", budget=allocation.budget - spent)

    def create(self, owner_id: str, obj_in: TransactionCreate) -> Transaction:
        values = obj_in.model_dump()
        values["date"] = to_storage(to_server_time(obj_in.date))
        if crud.transaction.find_identical(self.db, owner_id=owner_id, **values):
            raise ValidationError("Transaction already exists.")
        self._check_budget(owner_id, values)
        transaction = crud.transaction.create(self.db, owner_id=owner_id, values=values)
        self.cache.invalidate(owner_id, *AFFECTED_RESOURCES)
        return transaction

    def update(self, owner_id: str, transaction_id: str, obj_in: TransactionUpdate) -> bool:
        transaction = crud.transaction.get(self.db, owner_id=owner_id, id=transaction_id)
        if not transaction:
            raise NotFoundError("Transaction not found.")
        values = obj_in.model_dump()
        values["date"] = to_storage(to_server_time(obj_in.date))
        changes = {k: v for k, v in values.items() if getattr(transaction, k) != v}
        if not changes:
            return False
        if {"amount", "type", "allocation_id", "date"} & changes.keys():
            self._check_budget(owner_id, values, exclude_id=transaction.id)
        crud.transaction.update(self.db, db_obj=transaction, values=changes)
        self.cache.invalidate(owner_id, *AFFECTED_RESOURCES)
        return True

    def delete(self, owner_id: str, transaction_id: str) -> None:
        transaction = crud.transaction.get(self.db, owner_id=owner_id, id=transaction_id)
        if not transaction:
            raise NotFoundError("Transaction not found.")
        crud.transaction.remove(self.db, db_obj=transaction)
        self.cache.invalidate(owner_id, *AFFECTED_RESOURCES)
