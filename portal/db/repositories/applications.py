"""
Company application and checklist repository functions.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.enums import ChecklistEntryStatus, ChecklistEntryType


def get_application(db: Session, application_id: uuid.UUID) -> Optional[models.CompanyApplication]:
    return (
        db.query(models.CompanyApplication)
        .filter(models.CompanyApplication.id == application_id)
        .first()
    )


def get_checklist_entries(db: Session, application_id: uuid.UUID) -> List[models.ApplicationChecklistEntry]:
    return (
        db.query(models.ApplicationChecklistEntry)
        .filter(models.ApplicationChecklistEntry.application_id == application_id)
        .all()
    )


def create_checklist_entries(
    db: Session,
    application_id: uuid.UUID,
    entries: Iterable[Tuple[ChecklistEntryType, ChecklistEntryStatus]],
) -> List[models.ApplicationChecklistEntry]:
    created = []
    for entry_type, entry_status in entries:
        entry = models.ApplicationChecklistEntry(
            application_id=application_id,
            entry_type=entry_type,
            entry_status=entry_status,
        )
        db.add(entry)
        created.append(entry)
    return created
