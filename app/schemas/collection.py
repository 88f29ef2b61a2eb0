from datetime import date, datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field


WasteType = Literal["general", "recycling", "organic", "hazardous", "electronic", "bulk"]
Priority = Literal["low", "normal", "high", "urgent"]


class CollectionCreate(BaseModel):
    waste_type: WasteType
    zone: str = Field(min_length=1, max_length=50)
    address: str = Field(min_length=10, max_length=255)
    priority: Priority = "normal"
    notes: Optional[str] = None
    scheduled_date: Optional[date] = None


class CollectionOut(BaseModel):
    id: UUID
    user_id: UUID

    waste_type: str
    zone: str
    address: Optional[str] = None
    priority: str
    notes: Optional[str] = None

    status: str
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    collector_id: Optional[UUID] = None
    completed_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StatusUpdate(BaseModel):
    status: str


class CollectionUpdate(BaseModel):
    status: Optional[str] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = Field(default=None, max_length=20)
    notes: Optional[str] = Field(default=None, max_length=1000)


class AwardOut(BaseModel):
    user_id: UUID
    kind: str
    source_entity_id: UUID
    points: int
    created: bool
    balance: Optional[int] = None
