import uuid
from sqlalchemy import CheckConstraint, Column, Integer, String, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class User(Base):
    __tablename__ = "users"

    __table_args__ = (CheckConstraint("points >= 0", name="ck_users_points_non_negative"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String(100))
    email = Column(String(255), nullable=False, unique=True)

    role = Column(String(20), nullable=False, default="user")  # user / collector / admin
    zone = Column(String(50))

    # balance; only the award and reward services touch it
    points = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
