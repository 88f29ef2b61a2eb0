import uuid
from sqlalchemy import Column, Date, Float, Integer, String, TIMESTAMP, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class AnalyticsRollup(Base):
    __tablename__ = "analytics_rollups"

    __table_args__ = (UniqueConstraint("date", "zone", name="uq_analytics_rollups_date_zone"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    date = Column(Date, nullable=False)
    zone = Column(String(50), nullable=False)

    # accumulators, only ever incremented
    total_collections = Column(Integer, nullable=False, default=0, server_default="0")
    completed_collections = Column(Integer, nullable=False, default=0, server_default="0")
    recycling_weight = Column(Float, nullable=False, default=0.0, server_default="0")
    general_waste_weight = Column(Float, nullable=False, default=0.0, server_default="0")
    co2_saved = Column(Float, nullable=False, default=0.0, server_default="0")

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
