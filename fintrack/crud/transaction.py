from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from fintrack.models.allocation import Allocation
from fintrack.models.transaction import Transaction


class CRUDTransaction:
    def get(self, db: Session, *, owner_id: str, id: str) -> Optional[Transaction]:
        return (
            db.query(Transaction)
            .filter(Transaction.id == id, Transaction.owner_id == owner_id)
            .first()
        )

    def get_with_allocation(self, db: Session, *, owner_id: str, id: str):
        return (
            self._with_allocation_name(db)
            .filter(Transaction.id == id, Transaction.owner_id == owner_id)
            .first()
        )

    def find_identical(self, db: Session, *, owner_id: str, allocation_id: str, type: str,
                       amount: float, description: str, date: datetime) -> Optional[Transaction]:
        return (
            db.query(Transaction)
            .filter(
                Transaction.owner_id == owner_id,
                Transaction.allocation_id == allocation_id,
                Transaction.type == type,
                Transaction.amount == amount,
                Transaction.description == description,
                Transaction.date == date,
            )
            .first()
        )

    def _with_allocation_name(self, db: Session):
        return (
            db.query(Transaction, Allocation.name)
            .outerjoin(Allocation, Allocation.id == Transaction.allocation_id)
        )

    def list(
        self,
        db: Session,
        *,
        owner_id: str,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
        allocation_id: Optional[str] = None,
        type: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Tuple[List, int]:
        query = self._with_allocation_name(db).filter(Transaction.owner_id == owner_id)
        if search:
            query = query.filter(Transaction.description.ilike(f"%{search}%"))
        if allocation_id:
            query = query.filter(Transaction.allocation_id == allocation_id)
        if type:
            query = query.filter(Transaction.type == type)
        if start is not None and end is not None:
            query = query.filter(Transaction.date >= start, Transaction.date < end)
        total = query.count()
        rows = (
            query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return rows, total

    def recent(self, db: Session, *, owner_id: str, limit: int = 6) -> List:
        return (
            self._with_allocation_name(db)
            .filter(Transaction.owner_id == owner_id)
            .order_by(Transaction.date.desc())
            .limit(limit)
            .all()
        )

    def total(self, db: Session, *, owner_id: str, type: str,
              start: Optional[datetime] = None, end: Optional[datetime] = None) -> float:
        query = db.query(func.coalesce(func.sum(Transaction.amount), 0.0)).filter(
            Transaction.owner_id == owner_id, Transaction.type == type
        )
        if start is not None and end is not None:
            query = query.filter(Transaction.date >= start, Transaction.date < end)
        return float(query.scalar() or 0.0)

    def create(self, db: Session, *, owner_id: str, values: dict) -> Transaction:
        db_obj = Transaction(owner_id=owner_id, **values)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: Transaction, values: dict) -> Transaction:
        for field, value in values.items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, db_obj: Transaction) -> None:
        db.delete(db_obj)
        db.commit()


transaction = CRUDTransaction()
