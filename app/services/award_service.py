import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from app.db import atomic
from app.errors import DuplicateAward, InvalidStatus, NotFound
from app.models.collection import CollectionStatus
from app.repositories.ledger_repository import LedgerRepository
from app.services.notification_service import notify
from app.services.points_calculator import (
    COLLECTION_COMPLETED,
    REPORT_FILED,
    describe_action,
    points_for_action,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwardResult:
    user_id: UUID
    kind: str
    source_entity_id: UUID
    points: int
    created: bool
    balance: int | None = None


# ============================================================
# AWARD (raises DuplicateAward, flushes only)
# ============================================================
def award(
    db: Session,
    *,
    user_id: UUID,
    kind: str,
    source_entity_id: UUID,
    waste_type: str | None = None,
) -> AwardResult:
    """
    Record the award event, credit the balance and notify the user.

    The (source_entity_id, kind) uniqueness on award_events is the
    idempotency guard: a second call raises DuplicateAward before any
    balance change.
    """
    repo = LedgerRepository(db)

    if repo.get_user(user_id) is None:
        raise NotFound("User", user_id)

    points = points_for_action(kind, waste_type)
    reason = describe_action(kind, waste_type)

    repo.record_award_event(
        user_id=user_id,
        kind=kind,
        points=points,
        source_entity_id=source_entity_id,
        reason=reason,
    )

    balance = repo.increment_points(user_id, points)

    notify(
        repo,
        user_id,
        type="reward_earned",
        title="Points Earned!",
        message=f"You earned {points} points for {reason}",
    )

    logger.info(
        "points awarded",
        extra={
            "user_id": str(user_id),
            "kind": kind,
            "source_entity_id": str(source_entity_id),
            "points": points,
            "balance": balance,
        },
    )

    return AwardResult(
        user_id=user_id,
        kind=kind,
        source_entity_id=source_entity_id,
        points=points,
        created=True,
        balance=balance,
    )


def award_once(
    db: Session,
    *,
    user_id: UUID,
    kind: str,
    source_entity_id: UUID,
    waste_type: str | None = None,
) -> AwardResult:
    """Same as `award`, but a repeat is reported as `created=False` instead of raising."""
    try:
        return award(
            db,
            user_id=user_id,
            kind=kind,
            source_entity_id=source_entity_id,
            waste_type=waste_type,
        )
    except DuplicateAward:
        logger.info(
            "award already recorded; skipping",
            extra={"user_id": str(user_id), "kind": kind, "source_entity_id": str(source_entity_id)},
        )
        return AwardResult(
            user_id=user_id,
            kind=kind,
            source_entity_id=source_entity_id,
            points=0,
            created=False,
            balance=LedgerRepository(db).get_points(user_id),
        )


# ============================================================
# PUBLIC OPERATIONS (own the transaction)
# ============================================================
def award_for_completed_collection(db: Session, collection_id: UUID) -> AwardResult:
    with atomic(db):
        repo = LedgerRepository(db)
        collection = repo.get_collection(collection_id, for_update=True)
        if not collection:
            raise NotFound("Collection", collection_id)

        if collection.status != CollectionStatus.COMPLETED.value:
            raise InvalidStatus(
                "collection",
                collection.status,
                reason="Points are only awarded for completed collections",
            )

        result = award_once(
            db,
            user_id=collection.user_id,
            kind=COLLECTION_COMPLETED,
            source_entity_id=collection.id,
            waste_type=collection.waste_type,
        )

    return result


def award_for_filed_report(db: Session, report_id: UUID) -> AwardResult:
    with atomic(db):
        repo = LedgerRepository(db)
        report = repo.get_report(report_id)
        if not report:
            raise NotFound("Report", report_id)

        result = award_once(
            db,
            user_id=report.user_id,
            kind=REPORT_FILED,
            source_entity_id=report.id,
        )

    return result
