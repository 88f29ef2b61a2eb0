from datetime import datetime
from typing import Optional

from uuid import UUID

from pydantic import BaseModel


class NotificationOut(BaseModel):
    id: UUID
    user_id: UUID

    type: str
    title: str
    message: str
    link: Optional[str] = None

    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
