from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

NotificationType = Literal["application", "payment", "reminder", "message", "announcement", "attendance", "system"]


class NotificationRead(BaseModel):
    id: int
    title: str
    message: Optional[str] = None
    type: NotificationType
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class UnreadCount(BaseModel):
    unread_count: int


class MarkReadRequest(BaseModel):
    notification_ids: list[int]
