"""
Identity resolution from auth-proxy headers.

The portal does not authenticate users itself: an upstream proxy forwards the
authenticated email, which is mapped onto an existing company user.
"""
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.repositories import companies as company_repo
from portal.identity import IdentityData


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower() or None


def resolve_identity_from_headers(
    x_auth_request_user: Optional[str],
    x_auth_request_email: Optional[str],
    x_forwarded_user: Optional[str],
    x_forwarded_email: Optional[str],
) -> Tuple[Optional[str], Optional[str]]:
    user = x_auth_request_user or x_forwarded_user
    email = _normalize_email(x_auth_request_email or x_forwarded_email)
    return user, email


def get_company_user(db: Session, email: str) -> Optional[models.CompanyUser]:
    return company_repo.get_company_user_by_email(db, email)


def to_identity(user: models.CompanyUser) -> IdentityData:
    return IdentityData(user_id=user.id, company_id=user.company_id, email=user.email)
