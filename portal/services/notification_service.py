"""
Notification service: in-app notifications for portal users.

Creating notifications only adds rows to the caller's session so they are
committed together with the workflow change that produced them. Reading and
marking notifications is its own request and commits here.
"""

import uuid
from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable
from sqlalchemy.orm import Session

from portal.db import models, schemas
from portal.db.enums import NotificationType
from portal.db.repositories import notifications as notification_repo
from portal.db.models import now_utc


class NotificationService:
    """Service class for handling all notification operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_notification(
        self,
        receiver_user_id: uuid.UUID,
        notification_type: NotificationType,
        creator_user_id: Optional[uuid.UUID] = None,
        content: Optional[Dict[str, Any]] = None,
        done: Optional[bool] = None,
        due_date: Optional[datetime] = None,
    ) -> models.Notification:
        """Add an unread notification for ``receiver_user_id``; does not commit."""
        notification = notification_repo.create_notification(
            self.db,
            schemas.NotificationCreate(
                receiver_user_id=receiver_user_id,
                notification_type=notification_type,
                creator_user_id=creator_user_id,
                content=content,
                due_date=due_date,
            ),
        )
        notification.done = done
        return notification

    def create_notifications(
        self,
        receiver_user_ids: Iterable[uuid.UUID],
        notification_type: NotificationType,
        creator_user_id: Optional[uuid.UUID] = None,
        content: Optional[Dict[str, Any]] = None,
    ) -> List[models.Notification]:
        return [
            self.create_notification(receiver, notification_type, creator_user_id, content)
            for receiver in dict.fromkeys(receiver_user_ids)
        ]

    def get_user_notifications(
        self,
        user_id: uuid.UUID,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[models.Notification]:
        """
        Get notifications for a user, ordered by most recent.
        """
        return notification_repo.get_notifications(self.db, user_id, unread_only=unread_only, limit=limit)

    def mark_notification_read(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """
        Mark a notification as read for a specific user.
        Returns True if successful, False if notification not found or not owned by user.
        """
        notification = notification_repo.get_notification(self.db, notification_id, user_id)
        if not notification:
            return False

        if not notification.is_read:
            notification.is_read = True
            self.db.commit()

        return True

    def get_unread_count(self, user_id: uuid.UUID) -> int:
        return notification_repo.count_unread(self.db, user_id)

    def get_stats(self, user_id: uuid.UUID, recent: int = 5) -> schemas.NotificationStatsResponse:
        total = self.db.query(models.Notification).filter(models.Notification.receiver_user_id == user_id).count()
        return schemas.NotificationStatsResponse(
            unread_count=self.get_unread_count(user_id),
            total_notifications=total,
            recent_notifications=[
                schemas.Notification.model_validate(n) for n in self.get_user_notifications(user_id, limit=recent)
            ],
        )


def subscription_content(offer_id: uuid.UUID, offer_name: Optional[str], company_name: Optional[str], **extra) -> Dict[str, Any]:
    """JSON content shared by subscription notifications."""
    content = {
        "offerId": str(offer_id),
        "offerName": offer_name,
        "requestorCompanyName": company_name,
        "created": now_utc().isoformat(),
    }
    content.update({k: (str(v) if isinstance(v, uuid.UUID) else v) for k, v in extra.items()})
    return content
