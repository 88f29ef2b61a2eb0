from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context, require_staff
from app.schemas.collection import AwardOut, CollectionCreate, CollectionOut, CollectionUpdate, StatusUpdate
from app.services.collection_service import (
    create_collection,
    delete_collection,
    get_collection,
    list_collections,
    update_collection,
)
from app.services.status_transition_service import COLLECTION, settle_completed_collection, transition_status


router = APIRouter(prefix="/collections", tags=["collections"])


@router.post("", response_model=CollectionOut, status_code=201)
def request_collection(
    payload: CollectionCreate,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return create_collection(db, ctx.user_id, payload)


@router.get("", response_model=list[CollectionOut])
def read_collections(
    zone: str | None = None,
    status: str | None = None,
    limit: int = 50,
    offset: int = 0,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    # residents only see their own requests
    user_id = None if ctx.is_staff else ctx.user_id
    return list_collections(db, user_id=user_id, zone=zone, status=status, limit=limit, offset=offset)


@router.get("/{collection_id}", response_model=CollectionOut)
def read_collection(
    collection_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    collection = get_collection(db, collection_id)
    if not ctx.is_staff and collection.user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return collection


@router.patch("/{collection_id}", response_model=CollectionOut)
def edit_collection(
    collection_id: UUID,
    payload: CollectionUpdate,
    ctx: AuthContext = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return update_collection(db, collection_id, payload, actor_id=ctx.user_id)


@router.delete("/{collection_id}")
def remove_collection(
    collection_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    delete_collection(db, collection_id, user_id=ctx.user_id, is_staff=ctx.is_staff)
    return {"success": True}


@router.patch("/{collection_id}/status", response_model=CollectionOut)
def update_collection_status(
    collection_id: UUID,
    payload: StatusUpdate,
    ctx: AuthContext = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return transition_status(db, COLLECTION, collection_id, payload.status, actor_id=ctx.user_id)


@router.post("/{collection_id}/award", response_model=AwardOut)
def award_collection(
    collection_id: UUID,
    ctx: AuthContext = Depends(require_staff),
    db: Session = Depends(get_db),
):
    # pays a collection stored as completed with the full completion side effects
    result = settle_completed_collection(db, collection_id)
    return AwardOut(**asdict(result))
