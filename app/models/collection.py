import enum
import uuid
from sqlalchemy import Column, Date, ForeignKey, String, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class CollectionStatus(str, enum.Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    MISSED = "missed"


WASTE_TYPES = ("general", "recycling", "organic", "hazardous", "electronic", "bulk")


class Collection(Base):
    __tablename__ = "collections"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # owner; points go here, not to the collector
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    waste_type = Column(String(20), nullable=False)
    zone = Column(String(50), nullable=False)
    address = Column(String(255))
    priority = Column(String(10), nullable=False, default="normal")
    notes = Column(String(1000))

    status = Column(String(20), nullable=False, default=CollectionStatus.PENDING.value)

    scheduled_date = Column(Date, nullable=True)
    scheduled_time = Column(String(20), nullable=True)  # e.g. "08:00-12:00"

    collector_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    completed_at = Column(TIMESTAMP, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
