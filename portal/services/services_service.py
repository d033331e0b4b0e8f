"""
Marketplace services: paginated listing, service offerings, subscriptions
and subscription agreement consents.
"""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from portal import audit
from portal.db import models, schemas
from portal.db.enums import NotificationType, OfferStatus, OfferType, SubscriptionStatus
from portal.db.models import now_utc
from portal.db.repositories import companies as company_repo
from portal.db.repositories import consents as consent_repo
from portal.db.repositories import offer_subscriptions as subscription_repo
from portal.db.repositories import offers as offer_repo
from portal.errors import ControllerArgumentException, ForbiddenException, NotFoundException
from portal.identity import IdentityData
from portal.processes.offer_subscription import create_subscription_process
from portal.services.notification_service import NotificationService
from portal.utils.pagination import Pagination, paginate
from portal.utils.settings import get_settings

logger = logging.getLogger(__name__)

ERROR_STRING = "ERROR"


class ServicesService:
    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)

    def get_all_active_services(self, page: int, size: int) -> Pagination[schemas.ServiceOverviewData]:
        def convert(service: models.Offer) -> schemas.ServiceOverviewData:
            return schemas.ServiceOverviewData(
                id=service.id,
                title=service.name or ERROR_STRING,
                provider=service.provider,
                lead_picture_uri=service.thumbnail_url or ERROR_STRING,
                contact_email=service.contact_email,
                description=None,
                price=offer_repo.get_offer_price(self.db, service.id) or ERROR_STRING,
            )

        return paginate(
            offer_repo.get_active_offers_query(self.db, OfferType.SERVICE),
            page,
            size,
            get_settings().applications_max_page_size,
            convert,
        )

    def create_service_offering(self, identity: IdentityData, data: schemas.ServiceOfferingData) -> uuid.UUID:
        user = company_repo.get_company_user(self.db, identity.user_id)
        if user is None:
            raise ControllerArgumentException(f"IamUser is not assignable to company user {identity.user_id}", "user_id")
        company = company_repo.get_company(self.db, user.company_id)
        if company is None or not (company.shortname or "").strip():
            raise ControllerArgumentException(f"No matching company found for user {identity.user_id}", "user_id")
        sales_manager = company_repo.get_company_user(self.db, data.sales_manager)
        if sales_manager is None or sales_manager.company_id != company.id:
            raise ControllerArgumentException("SalesManager does not exist", "sales_manager")
        self._check_language_codes_exist(d.language_code for d in data.descriptions)

        def setup(service: models.Offer) -> None:
            service.contact_email = data.contact_email
            service.name = data.title
            service.sales_manager_id = data.sales_manager
            service.thumbnail_url = data.thumbnail_url
            service.offer_status = OfferStatus.CREATED
            service.provider_company_id = company.id

        service = offer_repo.create_offer(self.db, company.shortname, OfferType.SERVICE, setup)
        license_ = offer_repo.create_offer_license(self.db, data.price)
        offer_repo.create_offer_assigned_license(self.db, service.id, license_.id)
        offer_repo.add_offer_descriptions(
            self.db, [(service.id, d.language_code, "", d.description) for d in data.descriptions]
        )
        audit.log(
            self.db,
            action=audit.AuditAction.OFFER_CREATE,
            target_id=service.id,
            identity=identity,
            company_id=company.id,
        )
        service_id = service.id
        self.db.commit()
        logger.info("service_offering_created service_id=%s company_id=%s", service_id, company.id)
        return service_id

    def add_service_subscription(self, identity: IdentityData, service_id: uuid.UUID) -> uuid.UUID:
        service = offer_repo.get_offer(self.db, service_id, OfferType.SERVICE)
        if service is None:
            raise NotFoundException(f"Service {service_id} does not exist")
        if company_repo.get_company(self.db, identity.company_id) is None:
            raise ControllerArgumentException(f"User {identity.user_id} has no company assigned", "user_id")

        subscription = subscription_repo.create_offer_subscription(
            self.db, service_id, identity.company_id, SubscriptionStatus.PENDING, identity.user_id, identity.user_id
        )
        create_subscription_process(self.db, subscription)
        if service.sales_manager_id is not None:
            self.notifications.create_notification(
                service.sales_manager_id,
                NotificationType.SERVICE_REQUEST,
                creator_user_id=identity.user_id,
                content={"serviceName": service.name, "subscriptionId": str(subscription.id)},
            )
        audit.log(
            self.db,
            identity=identity,
            target_id=subscription.id,
            action=audit.AuditAction.SUBSCRIPTION_REQUEST,
            metadata={"service_id": str(service_id)},
        )
        subscription_id = subscription.id
        self.db.commit()
        logger.info("service_subscription_requested service_id=%s company_id=%s", service_id, identity.company_id)
        return subscription_id

    def get_service_details(self, identity: IdentityData, service_id: uuid.UUID, language: Optional[str] = None) -> schemas.OfferDetailData:
        service = offer_repo.get_offer(self.db, service_id, OfferType.SERVICE)
        if service is None:
            raise NotFoundException(f"Service {service_id} does not exist")
        description = offer_repo.get_offer_description(self.db, service.id, language)
        return schemas.OfferDetailData(
            id=service.id,
            title=service.name or ERROR_STRING,
            provider=service.provider,
            lead_picture_uri=service.thumbnail_url,
            contact_email=service.contact_email,
            description=description.description_short if description else None,
            price=offer_repo.get_offer_price(self.db, service.id) or ERROR_STRING,
            offer_subscription_detail_data=[
                schemas.OfferSubscriptionStateData(
                    offer_subscription_id=s.id,
                    offer_subscription_status=s.offer_subscription_status,
                )
                for s in subscription_repo.get_subscriptions_for_offer_and_company(self.db, service.id, identity.company_id)
            ],
        )

    def get_subscription_detail(self, identity: IdentityData, subscription_id: uuid.UUID) -> schemas.SubscriptionDetailData:
        subscription = subscription_repo.get_offer_subscription(self.db, subscription_id)
        if (
            subscription is None
            or subscription.company_id != identity.company_id
            or subscription.offer.offer_type != OfferType.SERVICE
        ):
            raise NotFoundException(f"Subscription {subscription_id} does not exist")
        return schemas.SubscriptionDetailData(
            offer_id=subscription.offer_id,
            offer_name=subscription.offer.name or ERROR_STRING,
            offer_subscription_status=subscription.offer_subscription_status,
        )

    # === Agreements and consents ===

    def get_service_agreements(self, service_id: uuid.UUID) -> List[schemas.AgreementData]:
        return [
            schemas.AgreementData(agreement_id=a.id, name=a.name, agreement_link=a.agreement_link)
            for a in offer_repo.get_offer_agreements(self.db, service_id, OfferType.SERVICE)
        ]

    def get_service_consent_detail(self, consent_id: uuid.UUID) -> schemas.ConsentDetailData:
        detail = consent_repo.get_consent_detail_data(self.db, consent_id, OfferType.SERVICE)
        if detail is None:
            raise NotFoundException(f"Consent {consent_id} does not exist")
        return detail

    def create_service_agreement_consent(
        self, identity: IdentityData, subscription_id: uuid.UUID, data: schemas.AgreementConsentData
    ) -> uuid.UUID:
        subscription = self._get_own_subscription(identity, subscription_id)
        self._ensure_offer_agreements(subscription, [data.agreement_id])
        consent = consent_repo.create_consent(
            self.db, data.agreement_id, identity.company_id, identity.user_id, data.consent_status
        )
        self.db.flush()
        consent_repo.create_consent_assigned_offer_subscription(self.db, consent.id, subscription.id)
        consent_id = consent.id
        self.db.commit()
        return consent_id

    def create_or_update_service_agreement_consents(
        self, identity: IdentityData, subscription_id: uuid.UUID, data: List[schemas.AgreementConsentData]
    ) -> None:
        subscription = self._get_own_subscription(identity, subscription_id)
        self._ensure_offer_agreements(subscription, [d.agreement_id for d in data])
        existing = consent_repo.get_consents_for_subscription(self.db, subscription.id)
        _, created = consent_repo.add_attach_and_modify_consents(
            self.db, existing, data, identity.company_id, identity.user_id, now_utc()
        )
        for consent in created:
            consent_repo.create_consent_assigned_offer_subscription(self.db, consent.id, subscription.id)
        audit.log(
            self.db,
            identity=identity,
            target_id=subscription.id,
            action=audit.AuditAction.CONSENT_UPDATE,
            metadata={"agreements": [str(d.agreement_id) for d in data]},
        )
        self.db.commit()

    def _get_own_subscription(self, identity: IdentityData, subscription_id: uuid.UUID) -> models.OfferSubscription:
        subscription = subscription_repo.get_offer_subscription(self.db, subscription_id)
        if subscription is None or subscription.offer.offer_type != OfferType.SERVICE:
            raise NotFoundException(f"Subscription {subscription_id} does not exist")
        if subscription.company_id != identity.company_id:
            raise ForbiddenException(f"Company {identity.company_id} is not the subscriber of {subscription_id}")
        return subscription

    def _ensure_offer_agreements(self, subscription: models.OfferSubscription, agreement_ids: Iterable[uuid.UUID]) -> None:
        allowed = {a.id for a in offer_repo.get_offer_agreements(self.db, subscription.offer_id, OfferType.SERVICE)}
        invalid = [str(a) for a in agreement_ids if a not in allowed]
        if invalid:
            raise ControllerArgumentException(
                f"Invalid Agreements {', '.join(invalid)} for subscription {subscription.id}", "agreement_id"
            )

    def _check_language_codes_exist(self, language_codes: Iterable[str]) -> None:
        codes = list(dict.fromkeys(language_codes))
        if not codes:
            return
        missing = [code for code in codes if code not in offer_repo.get_existing_language_codes(self.db, codes)]
        if missing:
            raise ControllerArgumentException(
                f"Language code(s) {','.join(missing)} do(es) not exist", "language_codes"
            )
