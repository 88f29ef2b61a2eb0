import uuid
from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, String, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class Schedule(Base):
    """Recurring weekly pickup slot for one waste type in one zone."""

    __tablename__ = "schedules"

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedules_day_of_week"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    zone = Column(String(50), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    time_slot = Column(String(20), nullable=False)
    waste_type = Column(String(20), nullable=False)

    collector_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
