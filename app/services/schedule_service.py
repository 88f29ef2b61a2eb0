import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.db import atomic
from app.models.schedule import Schedule
from app.repositories.ledger_repository import LedgerRepository


logger = logging.getLogger(__name__)


def list_schedules(
    db: Session,
    user_id: UUID,
    *,
    zone: str | None = None,
    waste_type: str | None = None,
):
    """Active pickup slots, defaulting to the caller's own zone."""
    repo = LedgerRepository(db)
    if not zone:
        user = repo.get_user(user_id)
        zone = user.zone if user else None
    return repo.list_schedules(zone=zone, waste_type=waste_type)


def create_schedule(db: Session, data) -> Schedule:
    with atomic(db):
        schedule = LedgerRepository(db).add(Schedule(**data.model_dump()))

    logger.info(
        "schedule created",
        extra={"schedule_id": str(schedule.id), "zone": schedule.zone, "day_of_week": schedule.day_of_week},
    )
    db.refresh(schedule)
    return schedule
