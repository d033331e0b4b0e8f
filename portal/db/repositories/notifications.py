"""
Notification repository functions.
"""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from portal.db import models, schemas


def create_notification(db: Session, notification: schemas.NotificationCreate) -> models.Notification:
    db_notification = models.Notification(**notification.model_dump())
    db.add(db_notification)
    return db_notification


def get_notifications(
    db: Session,
    receiver_user_id: uuid.UUID,
    unread_only: bool = False,
    limit: int = 50,
) -> List[models.Notification]:
    query = db.query(models.Notification).filter(models.Notification.receiver_user_id == receiver_user_id)
    if unread_only:
        query = query.filter(models.Notification.is_read.is_(False))
    return query.order_by(models.Notification.date_created.desc()).limit(limit).all()


def get_notification(db: Session, notification_id: uuid.UUID, receiver_user_id: uuid.UUID) -> Optional[models.Notification]:
    return (
        db.query(models.Notification)
        .filter(models.Notification.id == notification_id, models.Notification.receiver_user_id == receiver_user_id)
        .first()
    )


def count_unread(db: Session, receiver_user_id: uuid.UUID) -> int:
    return (
        db.query(models.Notification)
        .filter(models.Notification.receiver_user_id == receiver_user_id, models.Notification.is_read.is_(False))
        .count()
    )
