from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from fintrack.models.allocation import Allocation
from fintrack.models.transaction import Transaction
from fintrack.schemas.allocation import AllocationCreate, AllocationUpdate


class CRUDAllocation:
    def get(self, db: Session, *, owner_id: str, id: str) -> Optional[Allocation]:
        return (
            db.query(Allocation)
            .filter(Allocation.id == id, Allocation.owner_id == owner_id)
            .first()
        )

    def get_by_name(self, db: Session, *, owner_id: str, name: str, exclude_id: str = None) -> Optional[Allocation]:
        query = db.query(Allocation).filter(Allocation.owner_id == owner_id, Allocation.name == name)
        if exclude_id:
            query = query.filter(Allocation.id != exclude_id)
        return query.first()

    def list(
        self,
        db: Session,
        *,
        owner_id: str,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
    ) -> Tuple[List[Allocation], int]:
        query = db.query(Allocation).filter(Allocation.owner_id == owner_id)
        if search:
            query = query.filter(Allocation.name.ilike(f"%{search}%"))
        total = query.count()
        rows = (
            query.order_by(Allocation.name.asc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return rows, total

    def usage(self, db: Session, *, owner_id: str, allocation_ids: List[str], start, end,
              exclude_transaction_id: str = None) -> dict:
        """Sum of transaction amounts per allocation within [start, end)."""
        if not allocation_ids:
            return {}
        query = (
            db.query(Transaction.allocation_id, func.coalesce(func.sum(Transaction.amount), 0.0))
            .filter(
                Transaction.owner_id == owner_id,
                Transaction.allocation_id.in_(allocation_ids),
                Transaction.date >= start,
                Transaction.date < end,
            )
        )
        if exclude_transaction_id:
            query = query.filter(Transaction.id != exclude_transaction_id)
        return {allocation_id: float(total) for allocation_id, total in query.group_by(Transaction.allocation_id).all()}

    def create(self, db: Session, *, owner_id: str, obj_in: AllocationCreate) -> Allocation:
        db_obj = Allocation(owner_id=owner_id, name=obj_in.name, budget=obj_in.budget, type=obj_in.type)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: Allocation, obj_in: AllocationUpdate) -> Allocation:
        for field, value in obj_in.model_dump().items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, db_obj: Allocation) -> None:
        db.delete(db_obj)
        db.commit()


allocation = CRUDAllocation()
