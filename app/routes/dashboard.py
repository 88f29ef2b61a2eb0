from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context
from app.schemas.dashboard import DashboardStatsOut
from app.services.dashboard_service import dashboard_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsOut)
def read_stats(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return dashboard_stats(db, ctx.user_id, is_staff=ctx.is_staff)
