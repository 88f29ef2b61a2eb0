from datetime import date, datetime
from typing import List, Optional

from uuid import UUID

from pydantic import BaseModel


class RecentActivityOut(BaseModel):
    id: UUID
    date: Optional[datetime] = None
    type: str
    status: str
    address: Optional[str] = None


class UpcomingCollectionOut(BaseModel):
    id: UUID
    date: date
    time: Optional[str] = None
    type: str


class DashboardStatsOut(BaseModel):
    total_collections: int
    completed_collections: int
    pending_collections: int
    points: int
    recycling_rate: int
    co2_saved: float
    recent_activity: List[RecentActivityOut] = []
    upcoming_collection: Optional[UpcomingCollectionOut] = None
