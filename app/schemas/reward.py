from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field


RewardCategory = Literal["voucher", "discount", "service", "merchandise", "donation"]


class RewardCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    points_cost: int = Field(gt=0)
    category: RewardCategory = "voucher"
    is_active: bool = True


class RewardUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    points_cost: Optional[int] = Field(default=None, gt=0)
    category: Optional[RewardCategory] = None
    is_active: Optional[bool] = None


class RewardOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    points_cost: int
    category: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
