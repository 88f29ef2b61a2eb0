from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context, require_admin
from app.schemas.schedule import ScheduleCreate, ScheduleOut
from app.services.schedule_service import create_schedule, list_schedules


router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("", response_model=list[ScheduleOut])
def read_schedules(
    zone: str | None = None,
    waste_type: str | None = None,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return list_schedules(db, ctx.user_id, zone=zone, waste_type=waste_type)


@router.post("", response_model=ScheduleOut, status_code=201)
def add_schedule(
    payload: ScheduleCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return create_schedule(db, payload)
