"""
Audit trail of workflow decisions.

Each action implies the kind of entity it targets. Entries are added to the
caller's session and committed together with the change they record.
"""
from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from portal.db import models, schemas
from portal.db.repositories import audits as audit_repo
from portal.identity import IdentityData


class AuditAction(str, Enum):
    # Registration
    APPLICATION_SUBMIT = "application_submit"
    APPLICATION_DECLINE = "application_decline"
    PROCESS_STEP_RETRIGGER = "process_step_retrigger"
    # Provider details
    PROVIDER_DETAILS_SET = "provider_details_set"
    SERVICE_PROVIDER_DETAILS_CREATE = "service_provider_details_create"
    # Marketplace
    OFFER_CREATE = "offer_create"
    SUBSCRIPTION_REQUEST = "subscription_request"
    SUBSCRIPTION_ACTIVATE = "subscription_activate"
    SUBSCRIPTION_CANCEL = "subscription_cancel"
    CONSENT_UPDATE = "consent_update"
    # Identity providers
    IDENTITY_PROVIDER_CREATE = "identity_provider_create"
    IDENTITY_PROVIDER_UPDATE = "identity_provider_update"


TARGET_TYPES: Dict[AuditAction, str] = {
    AuditAction.APPLICATION_SUBMIT: "company_application",
    AuditAction.APPLICATION_DECLINE: "company_application",
    AuditAction.PROCESS_STEP_RETRIGGER: "process",
    AuditAction.PROVIDER_DETAILS_SET: "provider_company_detail",
    AuditAction.SERVICE_PROVIDER_DETAILS_CREATE: "provider_company_detail",
    AuditAction.OFFER_CREATE: "offer",
    AuditAction.SUBSCRIPTION_REQUEST: "offer_subscription",
    AuditAction.SUBSCRIPTION_ACTIVATE: "offer_subscription",
    AuditAction.SUBSCRIPTION_CANCEL: "offer_subscription",
    AuditAction.CONSENT_UPDATE: "offer_subscription",
    AuditAction.IDENTITY_PROVIDER_CREATE: "identity_provider",
    AuditAction.IDENTITY_PROVIDER_UPDATE: "identity_provider",
}


def log(
    db: Session,
    action: AuditAction,
    identity: IdentityData,
    target_id: uuid.UUID,
    company_id: Optional[uuid.UUID] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> models.AuditLog:
    """Record ``action`` by ``identity``; ``company_id`` defaults to the caller's company."""
    entry = schemas.AuditLogCreate(
        action_type=action.value,
        target_type=TARGET_TYPES[action],
        target_id=target_id,
        metadata=metadata or {},
    )
    return audit_repo.create_audit_log(
        db,
        entry,
        actor_user_id=identity.user_id,
        company_id=company_id or identity.company_id,
    )


__all__ = ["AuditAction", "TARGET_TYPES", "log"]
