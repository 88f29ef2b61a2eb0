import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.db import atomic
from app.errors import Forbidden, NotFound
from app.models.collection import Collection, CollectionStatus
from app.repositories.ledger_repository import LedgerRepository
from app.services.analytics_service import record_request
from app.services.notification_service import notify
from app.services.status_transition_service import COLLECTION, apply_transition, parse_status


logger = logging.getLogger(__name__)


def create_collection(db: Session, user_id: UUID, data) -> Collection:
    """Open a pending collection request for `user_id` and count it in today's rollup."""
    with atomic(db):
        repo = LedgerRepository(db)
        if repo.get_user(user_id) is None:
            raise NotFound("User", user_id)

        collection = repo.add(
            Collection(
                user_id=user_id,
                waste_type=data.waste_type,
                zone=data.zone,
                address=data.address,
                priority=data.priority,
                notes=data.notes,
                scheduled_date=data.scheduled_date,
                status=CollectionStatus.PENDING.value,
            )
        )

        record_request(db, zone=collection.zone)

        notify(
            repo,
            user_id,
            type="collection_reminder",
            title="Collection Request Submitted",
            message=f"Your {collection.waste_type} collection request has been submitted successfully.",
            link=f"/collections/{collection.id}",
        )

    logger.info(
        "collection requested",
        extra={"collection_id": str(collection.id), "user_id": str(user_id), "zone": collection.zone},
    )
    db.refresh(collection)
    return collection


def list_collections(
    db: Session,
    *,
    user_id: UUID | None = None,
    zone: str | None = None,
    status: str | None = None,
    limit: int = 50,
    offset: int = 0,
):
    q = db.query(Collection)
    if user_id:
        q = q.filter(Collection.user_id == user_id)
    if zone:
        q = q.filter(Collection.zone == zone)
    if status:
        q = q.filter(Collection.status == status)

    limit = max(1, min(limit, 200))
    offset = max(0, offset)

    return (
        q.order_by(Collection.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def get_collection(db: Session, collection_id: UUID) -> Collection:
    collection = LedgerRepository(db).get_collection(collection_id)
    if not collection:
        raise NotFound("Collection", collection_id)
    return collection


def update_collection(db: Session, collection_id: UUID, data, *, actor_id: UUID | None = None) -> Collection:
    """
    Staff edit of a collection: schedule slot, notes and optionally status.
    A status change runs its side effects in the same transaction.
    """
    fields = data.model_dump(exclude_unset=True)
    status = fields.pop("status", None)
    if status is not None:
        parse_status(COLLECTION, status)

    with atomic(db):
        repo = LedgerRepository(db)
        collection = repo.get_collection(collection_id, for_update=True)
        if not collection:
            raise NotFound("Collection", collection_id)

        for k, v in fields.items():
            setattr(collection, k, v)
        db.flush()

        if status is not None:
            apply_transition(db, COLLECTION, collection_id, status, actor_id=actor_id)

    db.refresh(collection)
    return collection


def delete_collection(db: Session, collection_id: UUID, *, user_id: UUID, is_staff: bool) -> None:
    """Residents may delete their own pending requests; staff may delete any."""
    with atomic(db):
        repo = LedgerRepository(db)
        collection = repo.get_collection(collection_id, for_update=True)
        if not collection:
            raise NotFound("Collection", collection_id)

        if not is_staff and (
            collection.user_id != user_id or collection.status != CollectionStatus.PENDING.value
        ):
            raise Forbidden()

        repo.delete(collection)

    logger.info(
        "collection deleted",
        extra={"collection_id": str(collection_id), "user_id": str(user_id)},
    )
