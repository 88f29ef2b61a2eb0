import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from app.models.analytics_rollup import AnalyticsRollup
from app.repositories.ledger_repository import LedgerRepository
from app.settings import DEFAULT_COLLECTION_WEIGHT_KG


logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


# ============================================================
# WRITES (flush only; the coordinator guards against replays)
# ============================================================
def record_completion(
    db: Session,
    *,
    zone: str,
    waste_type: str | None,
    co2_saved: float,
    on_date: date | None = None,
) -> AnalyticsRollup:
    """
    Count one completed collection in the (day, zone) rollup.

    Pure accumulator: calling it twice counts twice.
    """
    is_recycling = (waste_type or "").strip().lower() == "recycling"
    on_date = on_date or _utc_today()

    rollup = LedgerRepository(db).upsert_rollup(
        on_date,
        zone,
        completed_collections=1,
        recycling_weight=DEFAULT_COLLECTION_WEIGHT_KG if is_recycling else 0.0,
        general_waste_weight=0.0 if is_recycling else DEFAULT_COLLECTION_WEIGHT_KG,
        co2_saved=max(0.0, float(co2_saved or 0.0)),
    )

    logger.info(
        "analytics completion recorded",
        extra={
            "date": on_date.isoformat(),
            "zone": zone,
            "waste_type": waste_type,
            "co2_saved": co2_saved,
        },
    )
    return rollup


def record_request(db: Session, *, zone: str, on_date: date | None = None) -> AnalyticsRollup:
    on_date = on_date or _utc_today()
    return LedgerRepository(db).upsert_rollup(on_date, zone, total_collections=1)


# ============================================================
# READS
# ============================================================
def list_rollups(
    db: Session,
    *,
    zone: str | None = None,
    start: date | None = None,
    end: date | None = None,
):
    return LedgerRepository(db).list_rollups(zone=zone, start=start, end=end)


def summarize(
    db: Session,
    *,
    zone: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> dict:
    totals = LedgerRepository(db).sum_rollups(zone=zone, start=start, end=end)

    completed = int(totals["completed_collections"] or 0)
    recycling_weight = float(totals["recycling_weight"] or 0.0)
    general_weight = float(totals["general_waste_weight"] or 0.0)
    total_weight = recycling_weight + general_weight

    return {
        "zone": zone,
        "start": start,
        "end": end,
        "total_collections": int(totals["total_collections"] or 0),
        "completed_collections": completed,
        "recycling_weight": recycling_weight,
        "general_waste_weight": general_weight,
        "co2_saved": float(totals["co2_saved"] or 0.0),
        "recycling_rate": round(recycling_weight / total_weight * 100) if total_weight > 0 else 0,
    }
