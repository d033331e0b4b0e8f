"""
Audit log repository functions.
"""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from portal.db import models, schemas


def create_audit_log(
    db: Session,
    entry: schemas.AuditLogCreate,
    actor_user_id: uuid.UUID,
    company_id: Optional[uuid.UUID] = None,
) -> models.AuditLog:
    data = entry.model_dump()
    audit_log = models.AuditLog(
        action_type=data["action_type"],
        target_type=data["target_type"],
        target_id=data["target_id"],
        metadata_json=data["metadata"],
        actor_user_id=actor_user_id,
        company_id=company_id,
    )
    db.add(audit_log)
    return audit_log


def get_audit_logs_for_target(db: Session, target_type: str, target_id: uuid.UUID) -> List[models.AuditLog]:
    return (
        db.query(models.AuditLog)
        .filter(models.AuditLog.target_type == target_type, models.AuditLog.target_id == target_id)
        .order_by(models.AuditLog.date_created)
        .all()
    )
