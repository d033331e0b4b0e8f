"""
Company, company user and provider detail repository functions.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.enums import CompanyRole


def get_company(db: Session, company_id: uuid.UUID) -> Optional[models.Company]:
    return db.query(models.Company).filter(models.Company.id == company_id).first()


def get_company_roles(db: Session, company_id: uuid.UUID) -> Set[CompanyRole]:
    rows = (
        db.query(models.CompanyAssignedRole.company_role)
        .filter(models.CompanyAssignedRole.company_id == company_id)
        .all()
    )
    return {row[0] for row in rows}


def company_has_any_role(db: Session, company_id: uuid.UUID, roles: Iterable[CompanyRole]) -> bool:
    return bool(get_company_roles(db, company_id) & set(roles))


def assign_company_roles(db: Session, company_id: uuid.UUID, roles: Iterable[CompanyRole]) -> List[models.CompanyAssignedRole]:
    """Add role assignments the company does not have yet."""
    existing = get_company_roles(db, company_id)
    created = []
    for role in dict.fromkeys(roles):
        if role in existing:
            continue
        assignment = models.CompanyAssignedRole(company_id=company_id, company_role=role)
        db.add(assignment)
        created.append(assignment)
    return created


def get_company_user(db: Session, company_user_id: uuid.UUID) -> Optional[models.CompanyUser]:
    return db.query(models.CompanyUser).filter(models.CompanyUser.id == company_user_id).first()


def get_company_user_by_email(db: Session, email: str) -> Optional[models.CompanyUser]:
    return db.query(models.CompanyUser).filter(models.CompanyUser.email == email).first()


def get_provider_company_detail(db: Session, company_id: uuid.UUID) -> Optional[models.ProviderCompanyDetail]:
    return (
        db.query(models.ProviderCompanyDetail)
        .filter(models.ProviderCompanyDetail.company_id == company_id)
        .first()
    )


def get_provider_company_detail_by_id(db: Session, detail_id: uuid.UUID) -> Optional[models.ProviderCompanyDetail]:
    return (
        db.query(models.ProviderCompanyDetail)
        .filter(models.ProviderCompanyDetail.id == detail_id)
        .first()
    )


def create_provider_company_detail(
    db: Session,
    company_id: uuid.UUID,
    auto_setup_url: str,
    auto_setup_callback_url: Optional[str] = None,
    last_editor_id: Optional[uuid.UUID] = None,
) -> models.ProviderCompanyDetail:
    detail = models.ProviderCompanyDetail(
        company_id=company_id,
        auto_setup_url=auto_setup_url,
        auto_setup_callback_url=auto_setup_callback_url,
        last_editor_id=last_editor_id,
    )
    db.add(detail)
    db.flush()
    return detail
