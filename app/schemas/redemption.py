from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class RedemptionOut(BaseModel):
    id: UUID
    user_id: UUID
    reward_id: UUID

    points_spent: int
    code: str

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RedeemResult(BaseModel):
    success: bool = True
    code: str
    points_spent: int
    balance: int
