from datetime import datetime
import uuid
from sqlalchemy import Column, String, DateTime, Float, ForeignKey, Index
from fintrack.db.base_class import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Plain reference: transactions outlive a deleted allocation
    allocation_id = Column(String(36), nullable=False, index=True)
    type = Column(String(10), nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(String(50), nullable=False)
    date = Column(DateTime, nullable=False)  # UTC-naive
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_transactions_owner_date", "owner_id", "date"),
    )
