"""
Offer (app/service) repository functions: marketplace listings, descriptions,
licenses, favourites and agreements.
"""
from __future__ import annotations

import uuid
from typing import Callable, Iterable, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.enums import OfferStatus, OfferType


def get_offer(db: Session, offer_id: uuid.UUID, offer_type: Optional[OfferType] = None) -> Optional[models.Offer]:
    query = db.query(models.Offer).filter(models.Offer.id == offer_id)
    if offer_type is not None:
        query = query.filter(models.Offer.offer_type == offer_type)
    return query.first()


def offer_exists(db: Session, offer_id: uuid.UUID, offer_type: OfferType) -> bool:
    return get_offer(db, offer_id, offer_type) is not None


def get_active_offers_query(db: Session, offer_type: OfferType):
    return (
        db.query(models.Offer)
        .filter(models.Offer.offer_type == offer_type, models.Offer.offer_status == OfferStatus.ACTIVE)
        .order_by(models.Offer.name)
    )


def get_provided_offers(db: Session, company_id: uuid.UUID, offer_type: OfferType) -> List[models.Offer]:
    return (
        db.query(models.Offer)
        .filter(models.Offer.offer_type == offer_type, models.Offer.provider_company_id == company_id)
        .order_by(models.Offer.date_created)
        .all()
    )


def create_offer(
    db: Session,
    provider: str,
    offer_type: OfferType,
    setup: Optional[Callable[[models.Offer], None]] = None,
) -> models.Offer:
    offer = models.Offer(provider=provider, offer_type=offer_type, offer_status=OfferStatus.CREATED)
    if setup is not None:
        setup(offer)
    db.add(offer)
    db.flush()
    return offer


def create_offer_license(db: Session, licensetext: str) -> models.OfferLicense:
    license_ = models.OfferLicense(licensetext=licensetext)
    db.add(license_)
    db.flush()
    return license_


def create_offer_assigned_license(db: Session, offer_id: uuid.UUID, offer_license_id: uuid.UUID) -> models.OfferAssignedLicense:
    link = models.OfferAssignedLicense(offer_id=offer_id, offer_license_id=offer_license_id)
    db.add(link)
    return link


def get_offer_price(db: Session, offer_id: uuid.UUID) -> Optional[str]:
    row = (
        db.query(models.OfferLicense.licensetext)
        .join(models.OfferAssignedLicense, models.OfferAssignedLicense.offer_license_id == models.OfferLicense.id)
        .filter(models.OfferAssignedLicense.offer_id == offer_id)
        .first()
    )
    return row[0] if row else None


def add_offer_descriptions(db: Session, descriptions: Iterable[Tuple[uuid.UUID, str, str, str]]) -> None:
    """Add descriptions from (offer_id, language_code, long, short) tuples."""
    for offer_id, language_code, description_long, description_short in descriptions:
        db.add(models.OfferDescription(
            offer_id=offer_id,
            language_short_name=language_code,
            description_long=description_long,
            description_short=description_short,
        ))


def get_offer_description(db: Session, offer_id: uuid.UUID, language: Optional[str]) -> Optional[models.OfferDescription]:
    query = db.query(models.OfferDescription).filter(models.OfferDescription.offer_id == offer_id)
    if language:
        match = query.filter(models.OfferDescription.language_short_name == language).first()
        if match is not None:
            return match
    return query.order_by(models.OfferDescription.language_short_name).first()


def add_offer_languages(db: Session, languages: Iterable[Tuple[uuid.UUID, str]]) -> None:
    for offer_id, language_code in languages:
        db.add(models.OfferAssignedLanguage(offer_id=offer_id, language_short_name=language_code))


def add_offer_assigned_use_cases(db: Session, use_cases: Iterable[Tuple[uuid.UUID, uuid.UUID]]) -> None:
    for offer_id, use_case_id in use_cases:
        db.add(models.OfferAssignedUseCase(offer_id=offer_id, use_case_id=use_case_id))


def get_offer_use_case_names(db: Session, offer_id: uuid.UUID) -> List[str]:
    rows = (
        db.query(models.UseCase.name)
        .join(models.OfferAssignedUseCase, models.OfferAssignedUseCase.use_case_id == models.UseCase.id)
        .filter(models.OfferAssignedUseCase.offer_id == offer_id)
        .order_by(models.UseCase.name)
        .all()
    )
    return [row[0] for row in rows]


def get_offer_language_codes(db: Session, offer_id: uuid.UUID) -> List[str]:
    rows = (
        db.query(models.OfferAssignedLanguage.language_short_name)
        .filter(models.OfferAssignedLanguage.offer_id == offer_id)
        .order_by(models.OfferAssignedLanguage.language_short_name)
        .all()
    )
    return [row[0] for row in rows]


def get_existing_language_codes(db: Session, codes: Iterable[str]) -> Set[str]:
    codes = list(codes)
    if not codes:
        return set()
    rows = db.query(models.Language.short_name).filter(models.Language.short_name.in_(codes)).all()
    return {row[0] for row in rows}


def get_favourite(db: Session, company_user_id: uuid.UUID, app_id: uuid.UUID) -> Optional[models.CompanyUserAssignedAppFavourite]:
    return (
        db.query(models.CompanyUserAssignedAppFavourite)
        .filter(
            models.CompanyUserAssignedAppFavourite.company_user_id == company_user_id,
            models.CompanyUserAssignedAppFavourite.app_id == app_id,
        )
        .first()
    )


def get_favourite_app_ids(db: Session, company_user_id: uuid.UUID) -> List[uuid.UUID]:
    rows = (
        db.query(models.CompanyUserAssignedAppFavourite.app_id)
        .filter(models.CompanyUserAssignedAppFavourite.company_user_id == company_user_id)
        .all()
    )
    return [row[0] for row in rows]


def add_favourite(db: Session, company_user_id: uuid.UUID, app_id: uuid.UUID) -> models.CompanyUserAssignedAppFavourite:
    favourite = models.CompanyUserAssignedAppFavourite(company_user_id=company_user_id, app_id=app_id)
    db.add(favourite)
    return favourite


def get_offer_agreements(db: Session, offer_id: uuid.UUID, offer_type: OfferType) -> List[models.Agreement]:
    return (
        db.query(models.Agreement)
        .join(models.AgreementAssignedOffer, models.AgreementAssignedOffer.agreement_id == models.Agreement.id)
        .join(models.Offer, models.Offer.id == models.AgreementAssignedOffer.offer_id)
        .filter(models.Offer.id == offer_id, models.Offer.offer_type == offer_type)
        .order_by(models.Agreement.name)
        .all()
    )
