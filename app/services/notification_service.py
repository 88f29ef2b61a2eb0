import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.db import atomic
from app.errors import NotFound
from app.models.notification import Notification
from app.repositories.ledger_repository import LedgerRepository


logger = logging.getLogger(__name__)


NOTIFICATION_TYPES = (
    "collection_reminder",
    "collection_completed",
    "reward_earned",
    "issue_report",
    "system",
)


# ============================================================
# CREATION (always inside the caller's transaction)
# ============================================================
def notify(
    repo: LedgerRepository,
    user_id: UUID,
    *,
    type: str,
    title: str,
    message: str,
    link: str | None = None,
) -> Notification:
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")

    notification = repo.insert_notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        link=link,
    )
    logger.debug(
        "notification created",
        extra={"user_id": str(user_id), "type": type, "notification_id": str(notification.id)},
    )
    return notification


# ============================================================
# INBOX
# ============================================================
def list_notifications(
    db: Session,
    user_id: UUID,
    *,
    unread_only: bool = False,
    limit: int = 50,
    offset: int = 0,
):
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.is_read.is_(False))

    limit = max(1, min(limit, 200))
    offset = max(0, offset)

    return (
        q.order_by(Notification.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def unread_count(db: Session, user_id: UUID) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .filter(Notification.is_read.is_(False))
        .count()
    )


def mark_read(db: Session, user_id: UUID, notification_id: UUID) -> Notification:
    with atomic(db):
        notification = (
            db.query(Notification)
            .filter(Notification.id == notification_id)
            .filter(Notification.user_id == user_id)
            .first()
        )
        if not notification:
            raise NotFound("Notification", notification_id)
        notification.is_read = True
        db.flush()

    db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    with atomic(db):
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .filter(Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session="fetch")
        )
    return int(updated or 0)
