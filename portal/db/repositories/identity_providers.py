"""
Identity provider repository functions.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.enums import IdentityProviderCategory, IdentityProviderType


def get_company_identity_providers(db: Session, company_id: uuid.UUID) -> List[models.IdentityProvider]:
    return (
        db.query(models.IdentityProvider)
        .join(models.CompanyIdentityProvider, models.CompanyIdentityProvider.identity_provider_id == models.IdentityProvider.id)
        .filter(models.CompanyIdentityProvider.company_id == company_id)
        .order_by(models.IdentityProvider.date_created)
        .all()
    )


def get_identity_provider(db: Session, identity_provider_id: uuid.UUID) -> Optional[models.IdentityProvider]:
    return db.query(models.IdentityProvider).filter(models.IdentityProvider.id == identity_provider_id).first()


def is_assigned_to_company(db: Session, identity_provider_id: uuid.UUID, company_id: uuid.UUID) -> bool:
    return (
        db.query(models.CompanyIdentityProvider)
        .filter(
            models.CompanyIdentityProvider.identity_provider_id == identity_provider_id,
            models.CompanyIdentityProvider.company_id == company_id,
        )
        .first()
        is not None
    )


def create_identity_provider(
    db: Session,
    alias: str,
    category: IdentityProviderCategory,
    provider_type: IdentityProviderType,
    owner_id: uuid.UUID,
) -> models.IdentityProvider:
    identity_provider = models.IdentityProvider(
        alias=alias,
        identity_provider_category=category,
        identity_provider_type=provider_type,
        owner_id=owner_id,
    )
    db.add(identity_provider)
    db.flush()
    return identity_provider


def create_company_identity_provider(db: Session, company_id: uuid.UUID, identity_provider_id: uuid.UUID) -> models.CompanyIdentityProvider:
    link = models.CompanyIdentityProvider(company_id=company_id, identity_provider_id=identity_provider_id)
    db.add(link)
    return link


def get_company_user_links(
    db: Session, company_id: uuid.UUID, aliases: Iterable[str]
) -> List[Tuple[models.CompanyUser, List[models.CompanyUserIdentityProviderLink]]]:
    """Return each user of the company with its links to the given aliases."""
    aliases = list(aliases)
    users = (
        db.query(models.CompanyUser)
        .filter(models.CompanyUser.company_id == company_id)
        .order_by(models.CompanyUser.email)
        .all()
    )
    if not users:
        return []
    links = (
        db.query(models.CompanyUserIdentityProviderLink)
        .filter(
            models.CompanyUserIdentityProviderLink.company_user_id.in_([u.id for u in users]),
            models.CompanyUserIdentityProviderLink.alias.in_(aliases),
        )
        .all()
    )
    by_user = {}
    for link in links:
        by_user.setdefault(link.company_user_id, []).append(link)
    return [(user, by_user.get(user.id, [])) for user in users]
