from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context
from app.services.wallet_service import get_points_balance

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get("/me")
def read_wallet(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):

    balance = get_points_balance(db, ctx.user_id)

    return {
        "userId": str(ctx.user_id),
        "pointsBalance": balance,
    }
