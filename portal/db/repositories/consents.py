"""
Consent repository functions.

Consents link an agreement, a company and the consenting company user.
The bulk helpers create missing consents and modify existing ones in place
so a caller can reconcile a submitted set of agreement decisions in one pass.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from portal.db import models, schemas
from portal.db.enums import ConsentStatus, OfferType
from portal.db.models import now_utc


def create_consent(
    db: Session,
    agreement_id: uuid.UUID,
    company_id: uuid.UUID,
    company_user_id: uuid.UUID,
    consent_status: ConsentStatus,
    setup: Optional[Callable[[models.Consent], None]] = None,
    date_created: Optional[datetime] = None,
) -> models.Consent:
    consent = models.Consent(
        agreement_id=agreement_id,
        company_id=company_id,
        company_user_id=company_user_id,
        consent_status=consent_status,
        date_created=date_created or now_utc(),
    )
    if setup is not None:
        setup(consent)
    db.add(consent)
    return consent


def create_consents(
    db: Session,
    consents: Iterable[Tuple[uuid.UUID, uuid.UUID, uuid.UUID, ConsentStatus]],
) -> List[models.Consent]:
    """Create consents from (agreement_id, company_id, company_user_id, status) tuples sharing one timestamp."""
    now = now_utc()
    return [
        create_consent(db, agreement_id, company_id, company_user_id, status, date_created=now)
        for agreement_id, company_id, company_user_id, status in consents
    ]


def remove_consents(db: Session, consents: Iterable[models.Consent]) -> None:
    for consent in consents:
        db.delete(consent)


def create_consent_assigned_offer(db: Session, consent_id: uuid.UUID, offer_id: uuid.UUID) -> models.ConsentAssignedOffer:
    link = models.ConsentAssignedOffer(consent_id=consent_id, offer_id=offer_id)
    db.add(link)
    return link


def create_consent_assigned_offer_subscription(
    db: Session, consent_id: uuid.UUID, offer_subscription_id: uuid.UUID
) -> models.ConsentAssignedOfferSubscription:
    link = models.ConsentAssignedOfferSubscription(consent_id=consent_id, offer_subscription_id=offer_subscription_id)
    db.add(link)
    return link


def get_consent_detail_data(db: Session, consent_id: uuid.UUID, offer_type: OfferType) -> Optional[schemas.ConsentDetailData]:
    """Return consent details when the consent belongs to an offer of ``offer_type``."""
    row = (
        db.query(models.Consent, models.Company.name, models.Agreement.name)
        .join(models.Company, models.Company.id == models.Consent.company_id)
        .join(models.Agreement, models.Agreement.id == models.Consent.agreement_id)
        .filter(models.Consent.id == consent_id)
        .filter(
            db.query(models.AgreementAssignedOffer)
            .join(models.Offer, models.Offer.id == models.AgreementAssignedOffer.offer_id)
            .filter(
                models.AgreementAssignedOffer.agreement_id == models.Consent.agreement_id,
                models.Offer.offer_type == offer_type,
            )
            .exists()
        )
        .first()
    )
    if row is None:
        return None
    consent, company_name, agreement_name = row
    return schemas.ConsentDetailData(
        id=consent.id,
        company_name=company_name,
        company_user_id=consent.company_user_id,
        consent_status=consent.consent_status,
        agreement_name=agreement_name,
    )


def get_consents_for_offer(db: Session, offer_id: uuid.UUID, company_id: uuid.UUID) -> List[models.Consent]:
    return (
        db.query(models.Consent)
        .join(models.ConsentAssignedOffer, models.ConsentAssignedOffer.consent_id == models.Consent.id)
        .filter(models.ConsentAssignedOffer.offer_id == offer_id, models.Consent.company_id == company_id)
        .all()
    )


def get_consents_for_subscription(db: Session, offer_subscription_id: uuid.UUID) -> List[models.Consent]:
    return (
        db.query(models.Consent)
        .join(models.ConsentAssignedOfferSubscription, models.ConsentAssignedOfferSubscription.consent_id == models.Consent.id)
        .filter(models.ConsentAssignedOfferSubscription.offer_subscription_id == offer_subscription_id)
        .all()
    )


def attach_and_modify_consents(
    db: Session,
    consent_ids: Iterable[uuid.UUID],
    modify: Callable[[models.Consent], None],
) -> List[models.Consent]:
    ids = list(consent_ids)
    if not ids:
        return []
    consents = db.query(models.Consent).filter(models.Consent.id.in_(ids)).all()
    for consent in consents:
        modify(consent)
    return consents


def add_attach_and_modify_consents(
    db: Session,
    existing_consents: Sequence[models.Consent],
    agreement_consents: Iterable[schemas.AgreementConsentData],
    company_id: uuid.UUID,
    company_user_id: uuid.UUID,
    now: datetime,
) -> Tuple[List[models.Consent], List[models.Consent]]:
    """Reconcile submitted agreement decisions with the existing consents.

    Existing consents whose status differs are modified; agreements without a
    consent get a new one. Returns ``(all_consents, created_consents)``.
    """
    by_agreement = {consent.agreement_id: consent for consent in existing_consents}
    result: List[models.Consent] = []
    created: List[models.Consent] = []
    for data in agreement_consents:
        consent = by_agreement.get(data.agreement_id)
        if consent is None:
            consent = create_consent(
                db,
                data.agreement_id,
                company_id,
                company_user_id,
                data.consent_status,
                date_created=now,
            )
            created.append(consent)
        elif consent.consent_status != data.consent_status:
            consent.consent_status = data.consent_status
            consent.company_user_id = company_user_id
            consent.date_last_changed = now
        result.append(consent)
    db.flush()
    return result, created


def add_attach_and_modify_offer_consents(
    db: Session,
    offer_id: uuid.UUID,
    agreement_consents: Iterable[schemas.AgreementConsentData],
    company_id: uuid.UUID,
    company_user_id: uuid.UUID,
    now: datetime,
) -> List[models.Consent]:
    """Offer variant: newly created consents are assigned to ``offer_id``."""
    existing = get_consents_for_offer(db, offer_id, company_id)
    consents, created = add_attach_and_modify_consents(
        db, existing, agreement_consents, company_id, company_user_id, now
    )
    for consent in created:
        create_consent_assigned_offer(db, consent.id, offer_id)
    return consents
