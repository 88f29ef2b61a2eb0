from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context, require_staff
from app.schemas.collection import StatusUpdate
from app.schemas.report import ReportCreate, ReportOut
from app.services.report_service import file_report, get_report, list_reports
from app.services.status_transition_service import REPORT, transition_status


router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ReportOut, status_code=201)
def create_report(
    payload: ReportCreate,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return file_report(db, ctx.user_id, payload)


@router.get("", response_model=list[ReportOut])
def read_reports(
    status: str | None = None,
    limit: int = 50,
    offset: int = 0,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    user_id = None if ctx.is_staff else ctx.user_id
    return list_reports(db, user_id=user_id, status=status, limit=limit, offset=offset)


@router.get("/{report_id}", response_model=ReportOut)
def read_report(
    report_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    report = get_report(db, report_id)
    if not ctx.is_staff and report.user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return report


@router.patch("/{report_id}/status", response_model=ReportOut)
def update_report_status(
    report_id: UUID,
    payload: StatusUpdate,
    ctx: AuthContext = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return transition_status(db, REPORT, report_id, payload.status, actor_id=ctx.user_id)
