from datetime import date, datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class AnalyticsRollupOut(BaseModel):
    id: UUID
    date: date
    zone: str

    total_collections: int
    completed_collections: int
    recycling_weight: float
    general_waste_weight: float
    co2_saved: float

    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AnalyticsSummaryOut(BaseModel):
    zone: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None

    total_collections: int
    completed_collections: int
    recycling_weight: float
    general_waste_weight: float
    co2_saved: float
    recycling_rate: int
