"""
In-app notifications of the calling company user.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from portal.api.deps import get_current_identity
from portal.db import schemas
from portal.db.database import get_db
from portal.errors import NotFoundException
from portal.identity import IdentityData
from portal.services.notification_service import NotificationService


router = APIRouter(prefix="/api/notification", tags=["notifications"])


@router.get("", response_model=schemas.NotificationListResponse)
def list_own_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    """Newest first; ``unread_count`` covers all unread entries, not only the returned ones."""
    service = NotificationService(db)
    items = service.get_user_notifications(identity.user_id, unread_only=unread_only, limit=limit)
    return {
        "notifications": items,
        "unread_count": service.get_unread_count(identity.user_id),
        "total_count": len(items),
    }


@router.get("/count")
def count_unread_notifications(
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return {"unread_count": NotificationService(db).get_unread_count(identity.user_id)}


@router.get("/stats", response_model=schemas.NotificationStatsResponse)
def notification_stats(
    recent: int = Query(5, ge=0, le=50),
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return NotificationService(db).get_stats(identity.user_id, recent=recent)


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def set_notification_read(
    notification_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    # Notifications of other users are reported as missing.
    if not NotificationService(db).mark_notification_read(notification_id, identity.user_id):
        raise NotFoundException(f"Notification {notification_id} does not exist", param_name="notificationId")
