from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context, require_admin
from app.models.reward import Reward
from app.schemas.redemption import RedeemResult, RedemptionOut
from app.schemas.reward import RewardCreate, RewardUpdate, RewardOut
from app.services.reward_service import list_redemptions, list_rewards, redeem_reward
from app.services.wallet_service import get_points_balance


router = APIRouter(tags=["rewards"])


@router.get("/rewards", response_model=list[RewardOut])
def read_rewards(
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return list_rewards(db)


@router.post("/rewards", response_model=RewardOut, status_code=201)
def create_reward(
    payload: RewardCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    reward = Reward(
        name=payload.name,
        description=payload.description,
        points_cost=payload.points_cost,
        category=payload.category,
        is_active=payload.is_active,
    )
    db.add(reward)
    db.commit()
    db.refresh(reward)
    return reward


@router.patch("/rewards/{reward_id}", response_model=RewardOut)
def update_reward(
    reward_id: UUID,
    payload: RewardUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    reward = db.query(Reward).filter(Reward.id == reward_id).first()
    if not reward:
        raise HTTPException(status_code=404, detail="Reward not found")

    # existing redemptions keep their points_spent snapshot
    data = payload.model_dump(exclude_unset=True)
    for k, v in data.items():
        if v is None:
            continue
        setattr(reward, k, v)

    db.commit()
    db.refresh(reward)
    return reward


@router.post("/rewards/{reward_id}/redeem", response_model=RedeemResult)
def redeem(
    reward_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    redemption = redeem_reward(db, ctx.user_id, reward_id)
    return {
        "success": True,
        "code": redemption.code,
        "points_spent": redemption.points_spent,
        "balance": get_points_balance(db, ctx.user_id),
    }


@router.get("/redemptions", response_model=list[RedemptionOut])
def read_redemptions(
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return list_redemptions(db, ctx.user_id)
