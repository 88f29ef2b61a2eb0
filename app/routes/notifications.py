from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context
from app.schemas.notification import NotificationOut
from app.services.notification_service import list_notifications, mark_all_read, mark_read, unread_count


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
def read_notifications(
    unread: bool = False,
    limit: int = 50,
    offset: int = 0,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return list_notifications(db, ctx.user_id, unread_only=unread, limit=limit, offset=offset)


@router.get("/unread-count")
def read_unread_count(
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return {"count": unread_count(db, ctx.user_id)}


@router.post("/read-all")
def read_all(
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return {"updated": mark_all_read(db, ctx.user_id)}


@router.post("/{notification_id}/read", response_model=NotificationOut)
def read_one(
    notification_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return mark_read(db, ctx.user_id, notification_id)
