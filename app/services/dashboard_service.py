from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.collection import Collection, CollectionStatus
from app.repositories.ledger_repository import LedgerRepository


RECENT_ACTIVITY_LIMIT = 5


def dashboard_stats(db: Session, user_id: UUID, *, is_staff: bool) -> dict:
    """
    Headline figures for the dashboard. Residents see their own collections
    and their zone's CO2; staff see every collection and every zone.
    """
    repo = LedgerRepository(db)
    user = repo.get_user(user_id)

    q = db.query(Collection)
    if not is_staff:
        q = q.filter(Collection.user_id == user_id)

    total = q.count()
    completed = q.filter(Collection.status == CollectionStatus.COMPLETED.value).count()
    pending = q.filter(Collection.status == CollectionStatus.PENDING.value).count()
    recycled = (
        q.filter(Collection.status == CollectionStatus.COMPLETED.value)
        .filter(Collection.waste_type == "recycling")
        .count()
    )

    recent = q.order_by(Collection.created_at.desc()).limit(RECENT_ACTIVITY_LIMIT).all()

    today = datetime.now(timezone.utc).date()
    upcoming = (
        q.filter(Collection.status == CollectionStatus.SCHEDULED.value)
        .filter(Collection.scheduled_date >= today)
        .order_by(Collection.scheduled_date.asc())
        .first()
    )

    co2_zone = user.zone if (user is not None and not is_staff) else None
    co2_saved = float(repo.sum_rollups(zone=co2_zone)["co2_saved"] or 0.0)

    return {
        "total_collections": total,
        "completed_collections": completed,
        "pending_collections": pending,
        "points": int(user.points or 0) if user else 0,
        "recycling_rate": round(recycled / completed * 100) if completed > 0 else 0,
        "co2_saved": co2_saved,
        "recent_activity": [
            {
                "id": c.id,
                "date": c.created_at,
                "type": c.waste_type,
                "status": c.status,
                "address": c.address,
            }
            for c in recent
        ],
        "upcoming_collection": (
            {
                "id": upcoming.id,
                "date": upcoming.scheduled_date,
                "time": upcoming.scheduled_time,
                "type": upcoming.waste_type,
            }
            if upcoming
            else None
        ),
    }
