from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context, require_staff
from app.schemas.analytics import AnalyticsRollupOut, AnalyticsSummaryOut
from app.services.analytics_service import list_rollups, summarize


router = APIRouter(prefix="/analytics", tags=["analytics"])


def _check_range(start: date | None, end: date | None):
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="start must be on or before end")


@router.get("", response_model=list[AnalyticsRollupOut])
def read_rollups(
    zone: str | None = None,
    start: date | None = None,
    end: date | None = None,
    ctx: AuthContext = Depends(require_staff),
    db: Session = Depends(get_db),
):
    _check_range(start, end)
    return list_rollups(db, zone=zone, start=start, end=end)


@router.get("/summary", response_model=AnalyticsSummaryOut)
def read_summary(
    zone: str | None = None,
    start: date | None = None,
    end: date | None = None,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    _check_range(start, end)
    return summarize(db, zone=zone, start=start, end=end)
