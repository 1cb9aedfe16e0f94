from datetime import datetime
import uuid
from sqlalchemy import Column, String, DateTime, Float, ForeignKey, UniqueConstraint
from fintrack.db.base_class import Base


class Allocation(Base):
    """Budget category of a user, either an income or an expense bucket."""
    __tablename__ = "allocations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    budget = Column(Float, nullable=False)
    type = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_allocations_owner_name"),
    )
