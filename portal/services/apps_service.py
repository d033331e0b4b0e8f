"""
Marketplace apps: listings, favourites, subscriptions and app creation.

Subscription requests notify the app's sales manager in-app and mail the
provider contact once the request has been committed.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from portal import audit
from portal.db import models, schemas
from portal.db.enums import NotificationType, OfferStatus, OfferType, SubscriptionStatus
from portal.db.models import now_utc
from portal.db.repositories import companies as company_repo
from portal.db.repositories import offer_subscriptions as subscription_repo
from portal.db.repositories import offers as offer_repo
from portal.errors import ControllerArgumentException, NotFoundException, UnexpectedConditionException
from portal.identity import IdentityData
from portal.processes.offer_subscription import create_subscription_process
from portal.services.mailing_service import MailingService, get_mailing_service
from portal.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class AppsService:
    def __init__(self, db: Session, mailing_service: Optional[MailingService] = None):
        self.db = db
        self.mailing_service = mailing_service or get_mailing_service()
        self.notifications = NotificationService(db)

    # === Listings ===

    def get_all_active_apps(self, language: Optional[str] = None) -> List[schemas.AppData]:
        apps = offer_repo.get_active_offers_query(self.db, OfferType.APP).all()
        result = []
        for app in apps:
            description = offer_repo.get_offer_description(self.db, app.id, language)
            result.append(schemas.AppData(
                id=app.id,
                name=app.name or "",
                short_description=description.description_short if description else "",
                provider=app.provider,
                price=offer_repo.get_offer_price(self.db, app.id) or "",
                lead_picture_uri=app.thumbnail_url,
                use_cases=offer_repo.get_offer_use_case_names(self.db, app.id),
            ))
        return result

    def get_all_user_business_apps(self, identity: IdentityData) -> List[schemas.BusinessAppData]:
        return [
            schemas.BusinessAppData(
                id=app.id,
                name=app.name or "",
                uri=app.app_url,
                lead_picture_uri=app.thumbnail_url,
                provider=app.provider,
            )
            for subscription, app in subscription_repo.get_subscribed_offers(self.db, identity.company_id, OfferType.APP)
            if subscription.offer_subscription_status == SubscriptionStatus.ACTIVE
        ]

    def get_app_details(self, identity: IdentityData, app_id: uuid.UUID, language: Optional[str] = None) -> schemas.AppDetailsData:
        app = offer_repo.get_offer(self.db, app_id, OfferType.APP)
        if app is None:
            raise NotFoundException(f"appId {app_id} does not exist")
        description = offer_repo.get_offer_description(self.db, app.id, language)
        subscription = subscription_repo.get_company_subscription(self.db, app.id, identity.company_id)
        return schemas.AppDetailsData(
            id=app.id,
            title=app.name or "",
            lead_picture_uri=app.thumbnail_url,
            provider=app.provider,
            provider_uri=app.marketing_url,
            contact_email=app.contact_email,
            contact_number=app.contact_number,
            use_cases=offer_repo.get_offer_use_case_names(self.db, app.id),
            long_description=description.description_long if description else "",
            price=offer_repo.get_offer_price(self.db, app.id) or "",
            languages=offer_repo.get_offer_language_codes(self.db, app.id),
            is_subscribed=subscription.offer_subscription_status if subscription else None,
        )

    def get_company_provided_apps(self, identity: IdentityData) -> List[schemas.ProvidedAppData]:
        return [
            schemas.ProvidedAppData(
                id=app.id,
                name=app.name,
                lead_picture_uri=app.thumbnail_url,
                provider=app.provider,
                offer_status=app.offer_status,
                last_changed=app.date_last_changed,
            )
            for app in offer_repo.get_provided_offers(self.db, identity.company_id, OfferType.APP)
        ]

    # === Favourites ===

    def get_all_favourite_apps(self, identity: IdentityData) -> List[uuid.UUID]:
        return offer_repo.get_favourite_app_ids(self.db, identity.user_id)

    def add_favourite_app(self, identity: IdentityData, app_id: uuid.UUID) -> None:
        if (
            not offer_repo.offer_exists(self.db, app_id, OfferType.APP)
            or offer_repo.get_favourite(self.db, identity.user_id, app_id) is not None
        ):
            raise ControllerArgumentException("Parameters are invalid or app is already favourited.")
        offer_repo.add_favourite(self.db, identity.user_id, app_id)
        self.db.commit()

    def remove_favourite_app(self, identity: IdentityData, app_id: uuid.UUID) -> None:
        favourite = offer_repo.get_favourite(self.db, identity.user_id, app_id)
        if favourite is None:
            raise ControllerArgumentException("Parameters are invalid or favourite does not exist.")
        self.db.delete(favourite)
        self.db.commit()

    # === Subscriptions ===

    def get_company_subscribed_app_subscription_statuses(self, identity: IdentityData) -> List[schemas.AppSubscriptionStatusData]:
        return [
            schemas.AppSubscriptionStatusData(
                app_id=app.id,
                app_name=app.name,
                provider=app.provider,
                offer_subscription_status=subscription.offer_subscription_status,
            )
            for subscription, app in subscription_repo.get_subscribed_offers(self.db, identity.company_id, OfferType.APP)
        ]

    def get_company_provided_app_subscription_statuses(self, identity: IdentityData) -> List[schemas.AppCompanySubscriptionStatusData]:
        grouped: Dict[uuid.UUID, schemas.AppCompanySubscriptionStatusData] = {}
        for subscription, company in subscription_repo.get_provided_offer_subscriptions(
            self.db, identity.company_id, OfferType.APP
        ):
            entry = grouped.setdefault(
                subscription.offer_id,
                schemas.AppCompanySubscriptionStatusData(app_id=subscription.offer_id),
            )
            entry.companies.append(schemas.CompanySubscriptionStatusData(
                company_id=company.id,
                company_name=company.name,
                offer_subscription_status=subscription.offer_subscription_status,
            ))
        return list(grouped.values())

    def add_own_company_app_subscription(self, identity: IdentityData, app_id: uuid.UUID) -> uuid.UUID:
        app = offer_repo.get_offer(self.db, app_id, OfferType.APP)
        if app is None:
            raise NotFoundException(f"App {app_id} does not exist")
        requester = company_repo.get_company_user(self.db, identity.user_id)
        company = company_repo.get_company(self.db, identity.company_id)
        if requester is None or company is None:
            raise ControllerArgumentException(f"user {identity.user_id} is not assigned with a company")

        subscription = subscription_repo.get_company_subscription(self.db, app_id, company.id)
        if subscription is None:
            subscription = subscription_repo.create_offer_subscription(
                self.db, app_id, company.id, SubscriptionStatus.PENDING, requester.id
            )
        elif subscription.offer_subscription_status in (SubscriptionStatus.ACTIVE, SubscriptionStatus.PENDING):
            raise ControllerArgumentException(f"company {company.id} is already subscribed to {app_id}")
        else:
            subscription.offer_subscription_status = SubscriptionStatus.PENDING
            subscription.last_editor_id = requester.id
            subscription.date_last_changed = now_utc()

        missing = []
        if app.name is None:
            missing.append("App.AppName")
        if app.contact_email is None:
            missing.append("App.ProviderContactEmail")
        if missing:
            raise UnexpectedConditionException(
                f"The following fields of app '{app_id}' have not been configured properly: {', '.join(missing)}"
            )

        if subscription.process_id is None:
            create_subscription_process(self.db, subscription)
        if app.sales_manager_id is not None:
            self.notifications.create_notification(
                app.sales_manager_id,
                NotificationType.APP_SUBSCRIPTION_REQUEST,
                creator_user_id=requester.id,
                content={
                    "appName": app.name,
                    "requestorCompanyName": company.name,
                    "userEmail": requester.email,
                },
            )
        audit.log(
            self.db,
            identity=identity,
            company_id=company.id,
            target_id=subscription.id,
            action=audit.AuditAction.SUBSCRIPTION_REQUEST,
            metadata={"app_id": str(app_id)},
        )
        subscription_id = subscription.id
        self.db.commit()
        logger.info("app_subscription_requested app_id=%s company_id=%s", app_id, company.id)

        self.mailing_service.send_mails(
            app.contact_email,
            {"appProviderName": app.provider, "appName": app.name},
            ["subscription-request"],
        )
        return subscription_id

    def activate_own_company_provided_app_subscription(
        self, identity: IdentityData, app_id: uuid.UUID, subscribing_company_id: uuid.UUID
    ) -> None:
        app = offer_repo.get_offer(self.db, app_id, OfferType.APP)
        if app is None:
            raise NotFoundException(f"App {app_id} does not exist.")
        if app.provider_company_id != identity.company_id:
            raise ControllerArgumentException(
                "Missing permission: The user's company does not provide the requested app so they cannot activate it."
            )
        subscription = subscription_repo.get_company_subscription(self.db, app_id, subscribing_company_id)
        if subscription is None or subscription.offer_subscription_status != SubscriptionStatus.PENDING:
            raise ControllerArgumentException("No pending subscription for provided parameters existing.")

        subscription.offer_subscription_status = SubscriptionStatus.ACTIVE
        subscription.last_editor_id = identity.user_id
        subscription.date_last_changed = now_utc()
        self.notifications.create_notification(
            subscription.requester_id,
            NotificationType.APP_SUBSCRIPTION_ACTIVATION,
            creator_user_id=identity.user_id,
            content={"appName": app.name},
        )
        audit.log(
            self.db,
            identity=identity,
            target_id=subscription.id,
            action=audit.AuditAction.SUBSCRIPTION_ACTIVATE,
        )
        self.db.commit()
        logger.info("app_subscription_activated app_id=%s company_id=%s", app_id, subscribing_company_id)

    def unsubscribe_own_company_app_subscription(self, identity: IdentityData, app_id: uuid.UUID) -> None:
        if not offer_repo.offer_exists(self.db, app_id, OfferType.APP):
            raise NotFoundException(f"App {app_id} does not exist.")
        subscription = subscription_repo.get_company_subscription(self.db, app_id, identity.company_id)
        if subscription is None or subscription.offer_subscription_status != SubscriptionStatus.ACTIVE:
            raise ControllerArgumentException(
                f"There is no active subscription for user '{identity.user_id}' and app '{app_id}'"
            )
        subscription.offer_subscription_status = SubscriptionStatus.INACTIVE
        subscription.last_editor_id = identity.user_id
        subscription.date_last_changed = now_utc()
        audit.log(
            self.db,
            identity=identity,
            target_id=subscription.id,
            action=audit.AuditAction.SUBSCRIPTION_CANCEL,
        )
        self.db.commit()

    # === App creation ===

    def create_app(self, app_input: schemas.AppInputModel) -> uuid.UUID:
        def setup(app: models.Offer) -> None:
            app.name = app_input.title
            app.marketing_url = app_input.provider_uri
            app.app_url = app_input.app_uri
            app.thumbnail_url = app_input.lead_picture_uri
            app.contact_email = app_input.contact_email
            app.contact_number = app_input.contact_number
            app.provider_company_id = app_input.provider_company_id
            app.sales_manager_id = app_input.sales_manager_id
            app.offer_status = OfferStatus.CREATED

        return self._create_app(app_input, setup)

    def add_app(self, app_request: schemas.AppRequestModel) -> uuid.UUID:
        if app_request.provider_company_id is None:
            raise ControllerArgumentException("Company Id must be specified", "provider_company_id")
        if not app_request.supported_language_codes:
            raise ControllerArgumentException("Language Codes must not be empty", "supported_language_codes")
        if not app_request.use_case_ids:
            raise ControllerArgumentException("Use Cases must not be empty", "use_case_ids")

        def setup(app: models.Offer) -> None:
            app.name = app_request.title
            app.thumbnail_url = app_request.lead_picture_uri
            app.provider_company_id = app_request.provider_company_id
            app.offer_status = OfferStatus.CREATED

        return self._create_app(app_request, setup)

    def _create_app(self, data, setup) -> uuid.UUID:
        app = offer_repo.create_offer(self.db, data.provider, OfferType.APP, setup)
        license_ = offer_repo.create_offer_license(self.db, data.price)
        offer_repo.create_offer_assigned_license(self.db, app.id, license_.id)
        offer_repo.add_offer_assigned_use_cases(self.db, [(app.id, use_case) for use_case in data.use_case_ids])
        offer_repo.add_offer_descriptions(self.db, [
            (app.id, d.language_code, d.long_description, d.short_description) for d in data.descriptions
        ])
        offer_repo.add_offer_languages(self.db, [(app.id, code) for code in data.supported_language_codes])
        app_id = app.id
        self.db.commit()
        logger.info("app_created app_id=%s provider=%s", app_id, data.provider)
        return app_id
