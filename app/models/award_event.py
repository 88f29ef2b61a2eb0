import uuid
from sqlalchemy import Column, ForeignKey, Integer, String, TIMESTAMP, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.db import Base


class AwardEvent(Base):
    __tablename__ = "award_events"

    __table_args__ = (
        UniqueConstraint("source_entity_id", "kind", name="uq_award_events_source_entity_id_kind"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    kind = Column(String(50), nullable=False)  # collection_completed / report_filed
    points = Column(Integer, nullable=False)
    reason = Column(String(255))

    source_entity_id = Column(UUID(as_uuid=True), nullable=False)

    occurred_at = Column(TIMESTAMP, server_default=func.now())
