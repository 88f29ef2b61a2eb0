import uuid
from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


REWARD_CATEGORIES = ("voucher", "discount", "service", "merchandise", "donation")


class Reward(Base):
    __tablename__ = "rewards"

    __table_args__ = (CheckConstraint("points_cost > 0", name="ck_rewards_points_cost_positive"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String(100), nullable=False)
    description = Column(String(255))

    points_cost = Column(Integer, nullable=False)

    category = Column(String(50), nullable=False, default="voucher")

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
