import uuid
from unittest.mock import MagicMock

import pytest

from portal.db import models
from portal.db.enums import (
    ApplicationStatus,
    CompanyRole,
    ConsentStatus,
    OfferType,
    ProcessStepStatus,
    ProcessStepType,
    ProcessType,
    SubscriptionStatus,
)
from portal.db.repositories import processes as process_repo
from portal.services.identity_provider_service import IdentityProviderService

from tests.conftest import auth_headers

pytestmark = pytest.mark.integration


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_requests_without_identity_are_rejected(client):
    assert client.get("/api/notification/count").status_code == 401
    assert client.get("/api/notification/count", headers=auth_headers("stranger@example.com")).status_code == 403


def test_network_submit(client, db_session, osp_setup, make_agreement):
    setup = osp_setup(steps=[ProcessStepType.SYNCHRONIZE_USER])
    agreement = make_agreement("Participant terms", roles=[CompanyRole.ACTIVE_PARTICIPANT])
    application_id = setup["application"].id

    resp = client.post(
        "/api/registration/network/partnerRegistration/submit",
        json={
            "company_roles": ["ACTIVE_PARTICIPANT"],
            "agreements": [{"agreement_id": str(agreement.id), "consent_status": "ACTIVE"}],
        },
        headers=auth_headers(setup["user"].email),
    )

    assert resp.status_code == 204
    assert db_session.get(models.CompanyApplication, application_id).application_status == ApplicationStatus.SUBMITTED


def test_network_submit_inactive_consent_is_bad_request(client, osp_setup, make_agreement):
    setup = osp_setup()
    agreement = make_agreement("Participant terms", roles=[CompanyRole.ACTIVE_PARTICIPANT])

    resp = client.post(
        "/api/registration/network/partnerRegistration/submit",
        json={
            "company_roles": ["ACTIVE_PARTICIPANT"],
            "agreements": [{"agreement_id": str(agreement.id), "consent_status": ConsentStatus.INACTIVE.value}],
        },
        headers=auth_headers(setup["user"].email),
    )

    assert resp.status_code == 400


def test_network_decline_unknown_application(client, make_company, make_user):
    user = make_user(make_company())
    resp = client.post(
        f"/api/registration/network/{uuid.uuid4()}/decline",
        json={"message": "no thanks"},
        headers=auth_headers(user.email),
    )
    assert resp.status_code == 404
    assert resp.json()["errors"] == {"detail": ["NETWORK_COMPANY_APPLICATION_NOT_EXIST"]}


def test_network_decline_submitted_application_conflicts(client, osp_setup):
    setup = osp_setup(steps=[ProcessStepType.MANUAL_DECLINE_OSP], status=ApplicationStatus.SUBMITTED)
    resp = client.post(
        f"/api/registration/network/{setup['application'].id}/decline",
        json={},
        headers=auth_headers(setup["user"].email),
    )
    assert resp.status_code == 409
    assert resp.json()["errors"] == {"detail": ["NETWORK_CONFLICT_CHECK_APPLICATION_STATUS"]}


def test_registration_retrigger_route(client, db_session, osp_setup):
    setup = osp_setup(steps=[ProcessStepType.RETRIGGER_SYNCHRONIZE_USER])
    process_id = setup["process"].id

    resp = client.post(
        f"/api/administration/registration/network/{setup['registration'].external_id}/retrigger-synchronize-users",
        headers=auth_headers(setup["osp_user"].email),
    )

    assert resp.status_code == 204
    steps = {s.process_step_type: s.process_step_status for s in process_repo.get_process_steps(db_session, process_id)}
    assert steps[ProcessStepType.RETRIGGER_SYNCHRONIZE_USER] == ProcessStepStatus.DONE
    assert steps[ProcessStepType.SYNCHRONIZE_USER] == ProcessStepStatus.TODO


def test_registration_retrigger_unknown_external_id(client, make_company, make_user):
    user = make_user(make_company())
    resp = client.post(
        "/api/administration/registration/network/missing/retrigger-callback-osp-declined",
        headers=auth_headers(user.email),
    )
    assert resp.status_code == 404
    assert resp.json()["errors"] == {"detail": ["NETWORK_NOT_FOUND_EXTERNAL_ID"]}


def test_subscription_configuration_roundtrip(client, make_company, make_user):
    user = make_user(make_company(roles=[CompanyRole.SERVICE_PROVIDER]))
    headers = auth_headers(user.email)

    empty = client.get("/api/administration/subscriptionconfiguration/owncompany", headers=headers)
    assert empty.status_code == 200
    assert (empty.json()["id"], empty.json()["url"]) == (None, None)

    resp = client.put(
        "/api/administration/subscriptionconfiguration/owncompany",
        json={"url": "https://provider.example.com/setup", "callback_url": "https://provider.example.com/cb"},
        headers=headers,
    )
    assert resp.status_code == 204

    body = client.get("/api/administration/subscriptionconfiguration/owncompany", headers=headers).json()
    assert body["url"] == "https://provider.example.com/setup"
    assert body["callback_url"] == "https://provider.example.com/cb"
    assert body["company_id"] == str(user.company_id)


def test_subscription_configuration_rejects_http_url(client, make_company, make_user):
    user = make_user(make_company(roles=[CompanyRole.APP_PROVIDER]))
    resp = client.put(
        "/api/administration/subscriptionconfiguration/owncompany",
        json={"url": "http://provider.example.com"},
        headers=auth_headers(user.email),
    )
    assert resp.status_code == 400
    assert "url" in resp.json()["errors"]


def test_subscription_process_retrigger(client, make_company, make_user, make_offer, make_subscription, make_process):
    provider = make_company(roles=[CompanyRole.APP_PROVIDER])
    provider_user = make_user(provider)
    customer = make_company()
    offer = make_offer(provider_company=provider)
    process = make_process(ProcessType.OFFER_SUBSCRIPTION, [ProcessStepType.RETRIGGER_PROVIDER])
    subscription = make_subscription(offer, customer, make_user(customer), process=process)
    headers = auth_headers(provider_user.email)

    resp = client.post(
        f"/api/administration/subscriptionconfiguration/process/offer-subscription/{subscription.id}/retrigger-provider",
        headers=headers,
    )
    assert resp.status_code == 204

    steps = client.get(
        f"/api/administration/subscriptionconfiguration/process/offer-subscription/{subscription.id}",
        headers=headers,
    ).json()
    assert len(steps) == 2


def test_service_provider_create_and_get(client, make_company, make_user):
    user = make_user(make_company(roles=[CompanyRole.SERVICE_PROVIDER]))
    headers = auth_headers(user.email)

    resp = client.post(
        "/api/administration/serviceprovider/owncompany",
        json={"url": "https://services.example.com"},
        headers=headers,
    )
    assert resp.status_code == 201
    detail_id = resp.json()["id"]

    body = client.get(f"/api/administration/serviceprovider/owncompany/{detail_id}", headers=headers).json()
    assert body["url"] == "https://services.example.com"


@pytest.fixture
def mailing_override(client):
    from portal.api.main import app
    from portal.services.mailing_service import get_mailing_service

    mailing = MagicMock()
    app.dependency_overrides[get_mailing_service] = lambda: mailing
    try:
        yield mailing
    finally:
        app.dependency_overrides.pop(get_mailing_service, None)


def test_app_subscribe_and_list(client, mailing_override, make_company, make_user, make_offer):
    provider = make_company(name="Provider Co", roles=[CompanyRole.APP_PROVIDER])
    sales_manager = make_user(provider)
    app_offer = make_offer(name="Fleet Tracker", provider_company=provider, sales_manager=sales_manager)
    customer_user = make_user(make_company())
    headers = auth_headers(customer_user.email)

    active = client.get("/api/apps/active", headers=headers).json()
    assert [a["name"] for a in active] == ["Fleet Tracker"]

    resp = client.post(f"/api/apps/{app_offer.id}/subscribe", headers=headers)
    assert resp.status_code == 201
    assert mailing_override.send_mails.call_count == 1

    statuses = client.get("/api/apps/subscribed/subscription-status", headers=headers).json()
    assert [s["offer_subscription_status"] for s in statuses] == [SubscriptionStatus.PENDING.value]


def test_services_active_pagination(client, make_company, make_user, make_offer):
    provider = make_company(roles=[CompanyRole.SERVICE_PROVIDER])
    for name in ("A", "B", "C"):
        make_offer(offer_type=OfferType.SERVICE, name=name, provider_company=provider)
    headers = auth_headers(make_user(provider).email)

    body = client.get("/api/services/active?page=0&size=2", headers=headers).json()
    assert body["meta"]["totalElements"] == 3
    assert body["meta"]["totalPages"] == 2
    assert body["meta"]["contentSize"] == 2

    resp = client.get("/api/services/active?page=0&size=21", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["errors"] == {"size": ["Parameter size must be between 1 and 20"]}


def test_identity_providers_list(client, db_session, make_company, make_user):
    from portal.api.identity_providers import get_identity_provider_service
    from portal.api.main import app

    user = make_user(make_company())
    admin_client = MagicMock()
    app.dependency_overrides[get_identity_provider_service] = lambda: IdentityProviderService(db_session, admin_client)
    try:
        resp = client.get("/api/administration/identityprovider/owncompany/identityproviders", headers=auth_headers(user.email))
    finally:
        app.dependency_overrides.pop(get_identity_provider_service, None)

    assert resp.status_code == 200
    assert resp.json() == []


def test_notifications_flow(client, db_session, make_company, make_user):
    from portal.db.enums import NotificationType
    from portal.services.notification_service import NotificationService

    user = make_user(make_company())
    notification = NotificationService(db_session).create_notification(user.id, NotificationType.WELCOME)
    db_session.commit()
    headers = auth_headers(user.email)

    assert client.get("/api/notification/count", headers=headers).json() == {"unread_count": 1}
    assert client.put(f"/api/notification/{notification.id}/read", headers=headers).status_code == 204
    assert client.get("/api/notification/count", headers=headers).json() == {"unread_count": 0}
    assert client.put(f"/api/notification/{uuid.uuid4()}/read", headers=headers).status_code == 404

    listing = client.get("/api/notification", headers=headers).json()
    assert listing["total_count"] == 1
    assert listing["unread_count"] == 0
    assert listing["notifications"][0]["notification_type"] == "WELCOME"
    assert client.get("/api/notification", params={"unread_only": True}, headers=headers).json()["total_count"] == 0
    assert client.get("/api/notification/stats", params={"recent": 0}, headers=headers).json()["recent_notifications"] == []

    missing = client.put(f"/api/notification/{uuid.uuid4()}/read", headers=headers).json()
    assert list(missing["errors"]) == ["notificationId"]
