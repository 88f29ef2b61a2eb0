"""
Status transitions for collections and reports.

Any status may be set from any other (a direct pending -> completed jump is
valid). Side effects are attached to *entering* a status, listed in
TRANSITION_EFFECTS, and fire only when the persisted previous status differs
from the requested one. Collections additionally fire only once per
collection for all time: the award event is the idempotency key, and
analytics plus the completion notice follow the award.
"""

import enum
import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from app.db import atomic
from app.errors import InvalidStatus, NotFound
from app.models.collection import Collection, CollectionStatus
from app.models.report import Report, ReportStatus
from app.repositories.ledger_repository import LedgerRepository
from app.services.analytics_service import record_completion
from app.services.award_service import AwardResult, award_once
from app.services.notification_service import notify
from app.services.points_calculator import COLLECTION_COMPLETED, co2_saved_kg


logger = logging.getLogger(__name__)


COLLECTION = "collection"
REPORT = "report"


class SideEffect(str, enum.Enum):
    COLLECTION_COMPLETED = "collection_completed"
    REPORT_RESOLVED = "report_resolved"


STATUS_TYPES = {
    COLLECTION: CollectionStatus,
    REPORT: ReportStatus,
}

TERMINAL_STATES = {
    COLLECTION: frozenset({CollectionStatus.COMPLETED, CollectionStatus.CANCELLED, CollectionStatus.MISSED}),
    REPORT: frozenset({ReportStatus.RESOLVED}),
}

# (entity type, status entered) -> side effect
TRANSITION_EFFECTS = {
    (COLLECTION, CollectionStatus.COMPLETED): SideEffect.COLLECTION_COMPLETED,
    (REPORT, ReportStatus.RESOLVED): SideEffect.REPORT_RESOLVED,
}


def _utcnow() -> datetime:
    # naive UTC, matching the TIMESTAMP columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_status(entity_type: str, value):
    status_type = STATUS_TYPES.get(entity_type)
    if status_type is None:
        raise InvalidStatus(entity_type, value, reason=f"Unknown entity type: {entity_type}")
    if isinstance(value, status_type):
        return value
    try:
        return status_type(str(getattr(value, "value", value)).strip().lower())
    except ValueError:
        raise InvalidStatus(entity_type, value)


def _stored_status(entity_type: str, value):
    try:
        return STATUS_TYPES[entity_type](value)
    except ValueError:
        return None


def is_terminal(entity_type: str, status) -> bool:
    return status in TERMINAL_STATES.get(entity_type, frozenset())


def side_effect_for(entity_type: str, previous, new):
    """The side effect owed for moving `previous` -> `new`, or None."""
    if previous == new:
        return None
    return TRANSITION_EFFECTS.get((entity_type, new))


# ============================================================
# SIDE EFFECTS
# ============================================================
def _on_collection_completed(db: Session, repo: LedgerRepository, collection: Collection) -> AwardResult:
    co2 = co2_saved_kg(collection.waste_type)

    result = award_once(
        db,
        user_id=collection.user_id,
        kind=COLLECTION_COMPLETED,
        source_entity_id=collection.id,
        waste_type=collection.waste_type,
    )
    if not result.created:
        logger.info(
            "collection completion already settled",
            extra={"collection_id": str(collection.id)},
        )
        return result

    record_completion(
        db,
        zone=collection.zone,
        waste_type=collection.waste_type,
        co2_saved=co2,
    )

    notify(
        repo,
        collection.user_id,
        type="collection_completed",
        title="Collection Completed",
        message=(
            f"Your {collection.waste_type} collection has been completed. "
            f"You earned {result.points} points and saved {co2:.1f} kg CO₂!"
        ),
        link=f"/collections/{collection.id}",
    )

    return result


def _on_report_resolved(db: Session, repo: LedgerRepository, report: Report):
    notify(
        repo,
        report.user_id,
        type="issue_report",
        title="Issue Resolved",
        message=f'Your report "{report.title}" has been resolved.',
        link=f"/reports/{report.id}",
    )


_EFFECT_HANDLERS = {
    SideEffect.COLLECTION_COMPLETED: _on_collection_completed,
    SideEffect.REPORT_RESOLVED: _on_report_resolved,
}


# ============================================================
# TRANSITIONS
# ============================================================
def _apply_collection(repo: LedgerRepository, entity_id: UUID, new, actor_id: UUID | None):
    collection = repo.get_collection(entity_id, for_update=True)
    if not collection:
        raise NotFound("Collection", entity_id)

    previous = _stored_status(COLLECTION, collection.status)
    collection.status = new.value

    if new is CollectionStatus.COMPLETED and previous is not CollectionStatus.COMPLETED:
        collection.completed_at = _utcnow()
        if actor_id is not None:
            collection.collector_id = actor_id

    return collection, previous


def _apply_report(repo: LedgerRepository, entity_id: UUID, new, actor_id: UUID | None):
    report = repo.get_report(entity_id, for_update=True)
    if not report:
        raise NotFound("Report", entity_id)

    previous = _stored_status(REPORT, report.status)
    report.status = new.value

    if new is ReportStatus.RESOLVED and previous is not ReportStatus.RESOLVED:
        report.resolved_at = _utcnow()
        if actor_id is not None:
            report.resolved_by = actor_id

    return report, previous


_APPLIERS = {
    COLLECTION: _apply_collection,
    REPORT: _apply_report,
}


def apply_transition(
    db: Session,
    entity_type: str,
    entity_id: UUID,
    new_status,
    *,
    actor_id: UUID | None = None,
):
    """Flush-only core of `transition_status`; the caller owns the transaction."""
    new = parse_status(entity_type, new_status)

    repo = LedgerRepository(db)
    entity, previous = _APPLIERS[entity_type](repo, entity_id, new, actor_id)
    db.flush()

    effect = side_effect_for(entity_type, previous, new)
    logger.info(
        "status transition",
        extra={
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "from": previous.value if previous else None,
            "to": new.value,
            "side_effect": effect.value if effect else None,
        },
    )
    if effect is not None:
        _EFFECT_HANDLERS[effect](db, repo, entity)

    return entity


def transition_status(
    db: Session,
    entity_type: str,
    entity_id: UUID,
    new_status,
    *,
    actor_id: UUID | None = None,
):
    """
    Set the status of a collection or report and run the side effects owed
    for that move, all in one transaction. Returns the updated entity.
    """
    # reject bad input before touching the session
    parse_status(entity_type, new_status)

    with atomic(db):
        entity = apply_transition(db, entity_type, entity_id, new_status, actor_id=actor_id)

    db.refresh(entity)
    return entity


def settle_completed_collection(db: Session, collection_id: UUID) -> AwardResult:
    """
    Run the completion side effects for a collection already stored as
    completed. A collection that was paid before reports created=False and
    nothing else happens.
    """
    with atomic(db):
        repo = LedgerRepository(db)
        collection = repo.get_collection(collection_id, for_update=True)
        if not collection:
            raise NotFound("Collection", collection_id)

        if collection.status != CollectionStatus.COMPLETED.value:
            raise InvalidStatus(
                COLLECTION,
                collection.status,
                reason="Points are only awarded for completed collections",
            )

        result = _on_collection_completed(db, repo, collection)

    return result
