import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from portal.db.enums import NotificationType


class NotificationCreate(BaseModel):
    receiver_user_id: uuid.UUID
    notification_type: NotificationType
    creator_user_id: Optional[uuid.UUID] = None
    content: Optional[Dict[str, Any]] = None
    is_read: bool = False
    due_date: Optional[datetime] = None


class Notification(BaseModel):
    id: uuid.UUID
    receiver_user_id: uuid.UUID
    notification_type: NotificationType
    creator_user_id: Optional[uuid.UUID] = None
    content: Optional[Dict[str, Any]] = None
    is_read: bool
    done: Optional[bool] = None
    due_date: Optional[datetime] = None
    date_created: datetime
    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: List[Notification]
    unread_count: int
    total_count: int


class NotificationStatsResponse(BaseModel):
    unread_count: int
    total_notifications: int
    recent_notifications: List[Notification]
