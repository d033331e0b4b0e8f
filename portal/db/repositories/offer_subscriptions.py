"""
Offer subscription repository functions.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.enums import OfferType, ProcessStepStatus, ProcessStepType, SubscriptionStatus
from portal.db.repositories.processes import VerifyProcessData, get_process


def create_offer_subscription(
    db: Session,
    offer_id: uuid.UUID,
    company_id: uuid.UUID,
    status: SubscriptionStatus,
    requester_id: uuid.UUID,
    last_editor_id: Optional[uuid.UUID] = None,
) -> models.OfferSubscription:
    subscription = models.OfferSubscription(
        offer_id=offer_id,
        company_id=company_id,
        offer_subscription_status=status,
        requester_id=requester_id,
        last_editor_id=last_editor_id or requester_id,
    )
    db.add(subscription)
    db.flush()
    return subscription


def get_offer_subscription(db: Session, subscription_id: uuid.UUID) -> Optional[models.OfferSubscription]:
    return db.query(models.OfferSubscription).filter(models.OfferSubscription.id == subscription_id).first()


def get_company_subscription(db: Session, offer_id: uuid.UUID, company_id: uuid.UUID) -> Optional[models.OfferSubscription]:
    return (
        db.query(models.OfferSubscription)
        .filter(models.OfferSubscription.offer_id == offer_id, models.OfferSubscription.company_id == company_id)
        .order_by(models.OfferSubscription.date_created.desc())
        .first()
    )


def get_subscribed_offers(db: Session, company_id: uuid.UUID, offer_type: OfferType) -> List[Tuple[models.OfferSubscription, models.Offer]]:
    return (
        db.query(models.OfferSubscription, models.Offer)
        .join(models.Offer, models.Offer.id == models.OfferSubscription.offer_id)
        .filter(models.OfferSubscription.company_id == company_id, models.Offer.offer_type == offer_type)
        .order_by(models.Offer.name)
        .all()
    )


def get_provided_offer_subscriptions(
    db: Session, provider_company_id: uuid.UUID, offer_type: OfferType
) -> List[Tuple[models.OfferSubscription, models.Company]]:
    return (
        db.query(models.OfferSubscription, models.Company)
        .join(models.Offer, models.Offer.id == models.OfferSubscription.offer_id)
        .join(models.Company, models.Company.id == models.OfferSubscription.company_id)
        .filter(models.Offer.provider_company_id == provider_company_id, models.Offer.offer_type == offer_type)
        .order_by(models.OfferSubscription.offer_id, models.Company.name)
        .all()
    )


def get_subscriptions_for_offer_and_company(
    db: Session, offer_id: uuid.UUID, company_id: uuid.UUID
) -> List[models.OfferSubscription]:
    return (
        db.query(models.OfferSubscription)
        .filter(models.OfferSubscription.offer_id == offer_id, models.OfferSubscription.company_id == company_id)
        .order_by(models.OfferSubscription.date_created)
        .all()
    )


def get_subscription_process_data(
    db: Session,
    subscription_id: uuid.UUID,
    process_step_types: Iterable[ProcessStepType],
) -> Optional[Tuple[SubscriptionStatus, VerifyProcessData]]:
    """Return the subscription status and its process with TODO steps of the given types."""
    subscription = get_offer_subscription(db, subscription_id)
    if subscription is None:
        return None
    if subscription.process_id is None:
        return subscription.offer_subscription_status, VerifyProcessData(process=None, process_steps=None)
    types = list(process_step_types)
    steps = (
        db.query(models.ProcessStep)
        .filter(
            models.ProcessStep.process_id == subscription.process_id,
            models.ProcessStep.process_step_status == ProcessStepStatus.TODO,
            models.ProcessStep.process_step_type.in_(types),
        )
        .order_by(models.ProcessStep.date_created)
        .all()
    )
    return subscription.offer_subscription_status, VerifyProcessData(
        process=get_process(db, subscription.process_id),
        process_steps=steps,
    )
