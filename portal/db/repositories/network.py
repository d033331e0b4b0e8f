"""
Network registration repository: read models for partner submission and
onboarding-service-provider decline.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.repositories.processes import VerifyProcessData, get_verify_process_data
from portal.db.enums import AgreementStatus, ApplicationStatus, ApplicationType, CompanyRole


@dataclass
class SubmitApplicationData:
    application_id: uuid.UUID
    status: ApplicationStatus
    callback_url: Optional[str]


@dataclass
class SubmitData:
    applications: List[SubmitApplicationData]
    role_agreement_ids: Dict[CompanyRole, List[uuid.UUID]]
    process_id: Optional[uuid.UUID]


@dataclass
class DeclineData:
    is_valid_type: bool
    is_valid_status: bool
    is_same_company: bool
    company: models.Company
    users: List[models.CompanyUser] = field(default_factory=list)
    invitations: List[models.Invitation] = field(default_factory=list)
    process_data: Optional[VerifyProcessData] = None


def get_role_agreement_ids(db: Session) -> Dict[CompanyRole, List[uuid.UUID]]:
    rows = (
        db.query(models.AgreementAssignedCompanyRole.company_role, models.Agreement.id)
        .join(models.Agreement, models.Agreement.id == models.AgreementAssignedCompanyRole.agreement_id)
        .filter(models.Agreement.agreement_status == AgreementStatus.ACTIVE)
        .all()
    )
    result: Dict[CompanyRole, List[uuid.UUID]] = {}
    for role, agreement_id in rows:
        result.setdefault(role, []).append(agreement_id)
    return result


def get_submit_data(db: Session, company_id: uuid.UUID) -> Optional[SubmitData]:
    """Return everything a partner submission needs, or None if the company is unknown."""
    company = db.query(models.Company).filter(models.Company.id == company_id).first()
    if company is None:
        return None

    rows = (
        db.query(models.CompanyApplication, models.OnboardingServiceProviderDetail.callback_url)
        .outerjoin(
            models.OnboardingServiceProviderDetail,
            models.OnboardingServiceProviderDetail.company_id == models.CompanyApplication.onboarding_service_provider_id,
        )
        .filter(models.CompanyApplication.company_id == company_id)
        .all()
    )
    applications = [
        SubmitApplicationData(application_id=app.id, status=app.application_status, callback_url=callback_url)
        for app, callback_url in rows
    ]

    registration = (
        db.query(models.NetworkRegistration)
        .filter(models.NetworkRegistration.company_id == company_id)
        .first()
    )
    return SubmitData(
        applications=applications,
        role_agreement_ids=get_role_agreement_ids(db),
        process_id=registration.process_id if registration else None,
    )


def get_decline_data(
    db: Session,
    application_id: uuid.UUID,
    application_type: ApplicationType,
    valid_statuses: Iterable[ApplicationStatus],
    company_id: uuid.UUID,
) -> Optional[DeclineData]:
    application = (
        db.query(models.CompanyApplication)
        .filter(models.CompanyApplication.id == application_id)
        .first()
    )
    if application is None:
        return None

    registration = (
        db.query(models.NetworkRegistration)
        .filter(models.NetworkRegistration.application_id == application_id)
        .first()
    )
    invitations = (
        db.query(models.Invitation)
        .filter(models.Invitation.company_application_id == application_id)
        .all()
    )
    return DeclineData(
        is_valid_type=application.company_application_type == application_type,
        is_valid_status=application.application_status in set(valid_statuses),
        is_same_company=application.company_id == company_id,
        company=application.company,
        users=list(application.company.users),
        invitations=invitations,
        process_data=get_verify_process_data(db, registration.process_id if registration else None),
    )


def get_registration_by_external_id(db: Session, external_id: str) -> Optional[models.NetworkRegistration]:
    return (
        db.query(models.NetworkRegistration)
        .filter(models.NetworkRegistration.external_id == external_id)
        .first()
    )


def get_registration_process_data(db: Session, external_id: str) -> Optional[VerifyProcessData]:
    registration = get_registration_by_external_id(db, external_id)
    if registration is None:
        return None
    return get_verify_process_data(db, registration.process_id)
