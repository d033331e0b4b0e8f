import uuid
from unittest.mock import MagicMock

import pytest

from portal.db import models, schemas
from portal.db.enums import (
    CompanyRole,
    NotificationType,
    OfferStatus,
    OfferType,
    ProcessStepType,
    SubscriptionStatus,
)
from portal.db.repositories import processes as process_repo
from portal.errors import ControllerArgumentException, NotFoundException, UnexpectedConditionException
from portal.services.apps_service import AppsService

from tests.conftest import identity_of


@pytest.fixture
def mailing():
    return MagicMock()


@pytest.fixture
def marketplace(make_company, make_user, make_offer):
    provider = make_company(name="Provider Co", roles=[CompanyRole.APP_PROVIDER])
    sales_manager = make_user(provider, email="sales@provider.example.com")
    app = make_offer(
        OfferType.APP,
        name="Fleet Tracker",
        provider_company=provider,
        sales_manager=sales_manager,
        price="free",
    )
    customer = make_company(name="Customer Co")
    customer_user = make_user(customer, email="buyer@customer.example.com")
    return {
        "provider": provider,
        "sales_manager": sales_manager,
        "app": app,
        "customer": customer,
        "customer_user": customer_user,
    }


def test_active_apps_lists_only_active(db_session, marketplace, make_offer, mailing):
    make_offer(OfferType.APP, name="Draft", status=OfferStatus.CREATED)
    make_offer(OfferType.SERVICE, name="A service")
    apps = AppsService(db_session, mailing).get_all_active_apps()
    assert [a.name for a in apps] == ["Fleet Tracker"]
    assert apps[0].price == "free"


def test_app_details_unknown(db_session, marketplace, mailing):
    with pytest.raises(NotFoundException):
        AppsService(db_session, mailing).get_app_details(identity_of(marketplace["customer_user"]), uuid.uuid4())


def test_subscribe_creates_pending_subscription_process_and_notification(db_session, marketplace, mailing):
    identity = identity_of(marketplace["customer_user"])
    app = marketplace["app"]

    subscription_id = AppsService(db_session, mailing).add_own_company_app_subscription(identity, app.id)

    subscription = db_session.get(models.OfferSubscription, subscription_id)
    assert subscription.offer_subscription_status == SubscriptionStatus.PENDING
    assert subscription.process_id is not None
    steps = [s.process_step_type for s in process_repo.get_process_steps(db_session, subscription.process_id)]
    assert steps == [ProcessStepType.TRIGGER_PROVIDER]

    notification = db_session.query(models.Notification).one()
    assert notification.receiver_user_id == marketplace["sales_manager"].id
    assert notification.notification_type == NotificationType.APP_SUBSCRIPTION_REQUEST
    mailing.send_mails.assert_called_once_with(
        "provider@example.com",
        {"appProviderName": "Provider Co", "appName": "Fleet Tracker"},
        ["subscription-request"],
    )

    details = AppsService(db_session, mailing).get_app_details(identity, app.id)
    assert details.is_subscribed == SubscriptionStatus.PENDING


def test_subscribe_twice_rejected(db_session, marketplace, mailing):
    identity = identity_of(marketplace["customer_user"])
    service = AppsService(db_session, mailing)
    service.add_own_company_app_subscription(identity, marketplace["app"].id)
    with pytest.raises(ControllerArgumentException):
        service.add_own_company_app_subscription(identity, marketplace["app"].id)


def test_subscribe_misconfigured_app(db_session, marketplace, make_offer, mailing):
    app = make_offer(OfferType.APP, name="No contact", contact_email=None)
    with pytest.raises(UnexpectedConditionException) as exc:
        AppsService(db_session, mailing).add_own_company_app_subscription(identity_of(marketplace["customer_user"]), app.id)
    assert "App.ProviderContactEmail" in str(exc.value)
    mailing.send_mails.assert_not_called()


def test_activate_and_unsubscribe(db_session, marketplace, mailing):
    customer_identity = identity_of(marketplace["customer_user"])
    provider_identity = identity_of(marketplace["sales_manager"])
    app_id = marketplace["app"].id
    service = AppsService(db_session, mailing)
    service.add_own_company_app_subscription(customer_identity, app_id)

    service.activate_own_company_provided_app_subscription(provider_identity, app_id, marketplace["customer"].id)
    business_apps = service.get_all_user_business_apps(customer_identity)
    assert [a.id for a in business_apps] == [app_id]
    activation = (
        db_session.query(models.Notification)
        .filter_by(notification_type=NotificationType.APP_SUBSCRIPTION_ACTIVATION)
        .one()
    )
    assert activation.receiver_user_id == marketplace["customer_user"].id

    provided = service.get_company_provided_app_subscription_statuses(provider_identity)
    assert provided[0].companies[0].offer_subscription_status == SubscriptionStatus.ACTIVE

    service.unsubscribe_own_company_app_subscription(customer_identity, app_id)
    statuses = service.get_company_subscribed_app_subscription_statuses(customer_identity)
    assert [s.offer_subscription_status for s in statuses] == [SubscriptionStatus.INACTIVE]


def test_activate_by_non_provider_rejected(db_session, marketplace, mailing):
    customer_identity = identity_of(marketplace["customer_user"])
    service = AppsService(db_session, mailing)
    service.add_own_company_app_subscription(customer_identity, marketplace["app"].id)
    with pytest.raises(ControllerArgumentException):
        service.activate_own_company_provided_app_subscription(
            customer_identity, marketplace["app"].id, marketplace["customer"].id
        )


def test_unsubscribe_without_active_subscription(db_session, marketplace, mailing):
    with pytest.raises(ControllerArgumentException):
        AppsService(db_session, mailing).unsubscribe_own_company_app_subscription(
            identity_of(marketplace["customer_user"]), marketplace["app"].id
        )


def test_favourites(db_session, marketplace, mailing):
    identity = identity_of(marketplace["customer_user"])
    app_id = marketplace["app"].id
    service = AppsService(db_session, mailing)

    service.add_favourite_app(identity, app_id)
    assert service.get_all_favourite_apps(identity) == [app_id]
    with pytest.raises(ControllerArgumentException):
        service.add_favourite_app(identity, app_id)

    service.remove_favourite_app(identity, app_id)
    assert service.get_all_favourite_apps(identity) == []
    with pytest.raises(ControllerArgumentException):
        service.remove_favourite_app(identity, app_id)


def test_create_app_and_list_provided(db_session, marketplace, make_language, mailing):
    make_language("en")
    use_case = models.UseCase(name="Traceability", shortname="TR")
    db_session.add(use_case)
    db_session.commit()
    service = AppsService(db_session, mailing)

    app_id = service.add_app(schemas.AppRequestModel(
        title="Parts Finder",
        provider="Provider Co",
        provider_company_id=marketplace["provider"].id,
        use_case_ids=[use_case.id],
        descriptions=[schemas.LocalizedDescription(language_code="en", long_description="Long", short_description="Short")],
        supported_language_codes=["en"],
        price="10 EUR",
    ))

    app = db_session.get(models.Offer, app_id)
    assert app.offer_status == OfferStatus.CREATED
    provided = service.get_company_provided_apps(identity_of(marketplace["sales_manager"]))
    assert {p.id for p in provided} == {marketplace["app"].id, app_id}


def test_add_app_requires_use_cases(db_session, marketplace, mailing):
    with pytest.raises(ControllerArgumentException) as exc:
        AppsService(db_session, mailing).add_app(schemas.AppRequestModel(
            title="Parts Finder",
            provider="Provider Co",
            provider_company_id=marketplace["provider"].id,
            supported_language_codes=["en"],
        ))
    assert exc.value.param_name == "use_case_ids"
