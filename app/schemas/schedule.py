from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.collection import WasteType


class ScheduleCreate(BaseModel):
    zone: str = Field(min_length=1, max_length=50)
    day_of_week: int = Field(ge=0, le=6)  # 0 = Sunday
    time_slot: str = Field(min_length=1, max_length=20)
    waste_type: WasteType
    collector_id: Optional[UUID] = None
    is_active: bool = True


class ScheduleOut(BaseModel):
    id: UUID
    zone: str
    day_of_week: int
    time_slot: str
    waste_type: str
    collector_id: Optional[UUID] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
