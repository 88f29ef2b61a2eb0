from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field


ReportType = Literal["missed_collection", "damaged_bin", "illegal_dumping", "other"]


class ReportCreate(BaseModel):
    type: ReportType
    title: str = Field(min_length=5, max_length=200)
    description: str = Field(min_length=20, max_length=2000)
    location: str = Field(min_length=5, max_length=255)
    priority: Literal["low", "normal", "high", "urgent"] = "normal"


class ReportOut(BaseModel):
    id: UUID
    user_id: UUID

    type: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    priority: str

    status: str
    resolved_by: Optional[UUID] = None
    resolved_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
