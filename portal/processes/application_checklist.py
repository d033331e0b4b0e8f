"""
Initial checklist for a submitted company application.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List, Tuple

from sqlalchemy.orm import Session

from portal.db.enums import ChecklistEntryStatus, ChecklistEntryType, ProcessStepType
from portal.db.repositories import applications as application_repo
from portal.errors import UnexpectedConditionException

ChecklistEntry = Tuple[ChecklistEntryType, ChecklistEntryStatus]


def create_initial_checklist(db: Session, application_id: uuid.UUID) -> List[ChecklistEntry]:
    """Create the missing checklist entries and return the complete checklist."""
    application = application_repo.get_application(db, application_id)
    if application is None:
        raise UnexpectedConditionException(f"application {application_id} does not exist")
    existing = {
        entry.entry_type: entry.entry_status
        for entry in application_repo.get_checklist_entries(db, application_id)
    }
    has_bpn = bool(application.company and application.company.business_partner_number)

    new_entries: List[ChecklistEntry] = []
    for entry_type in ChecklistEntryType:
        if entry_type in existing:
            continue
        if entry_type == ChecklistEntryType.BUSINESS_PARTNER_NUMBER and has_bpn:
            new_entries.append((entry_type, ChecklistEntryStatus.DONE))
        else:
            new_entries.append((entry_type, ChecklistEntryStatus.TO_DO))
    application_repo.create_checklist_entries(db, application_id, new_entries)
    return list(existing.items()) + new_entries


def get_initial_process_step_types(checklist: Iterable[ChecklistEntry]) -> List[ProcessStepType]:
    step_types: List[ProcessStepType] = []
    for entry_type, entry_status in checklist:
        if entry_status != ChecklistEntryStatus.TO_DO:
            continue
        if entry_type == ChecklistEntryType.REGISTRATION_VERIFICATION:
            step_types.append(ProcessStepType.MANUAL_VERIFY_REGISTRATION)
        elif entry_type == ChecklistEntryType.BUSINESS_PARTNER_NUMBER:
            step_types.extend((
                ProcessStepType.CREATE_BUSINESS_PARTNER_NUMBER_PUSH,
                ProcessStepType.CREATE_BUSINESS_PARTNER_NUMBER_MANUAL,
            ))
    step_types.append(ProcessStepType.MANUAL_DECLINE_APPLICATION)
    return step_types
