import os
import uuid

os.environ.setdefault("PYTEST_RUNNING", "1")

import pytest
from fastapi.testclient import TestClient

import portal.db.database as db_module
from portal.db import models
from portal.db.enums import (
    AgreementStatus,
    ApplicationStatus,
    ApplicationType,
    CompanyRole,
    CompanyStatus,
    OfferStatus,
    OfferType,
    ProcessStepStatus,
    ProcessType,
    SubscriptionStatus,
    UserStatus,
)
from portal.identity import IdentityData
from portal.utils.settings import refresh_settings_cache


@pytest.fixture(scope="session", autouse=True)
def _schema():
    models.Base.metadata.create_all(bind=db_module.engine)
    yield


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("DEV_MODE", "ALLOW_DEV_MODE", "APP_BASE_URL", "PROVIDER_URL_MAX_LENGTH", "APPLICATIONS_MAX_PAGE_SIZE"):
        monkeypatch.delenv(var, raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()


_GLOBAL_SESSION = None


# Per-test session; every table is emptied afterwards since services commit.
@pytest.fixture
def db_session(_schema):
    global _GLOBAL_SESSION
    session = db_module.SessionLocal()
    _GLOBAL_SESSION = session
    try:
        yield session
    finally:
        _GLOBAL_SESSION = None
        session.rollback()
        session.close()
        with db_module.engine.begin() as conn:
            for table in reversed(models.Base.metadata.sorted_tables):
                conn.execute(table.delete())


@pytest.fixture
def db(db_session):
    return db_session


def _override_get_db():
    if _GLOBAL_SESSION is not None:
        yield _GLOBAL_SESSION
        return
    session = db_module.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    from portal.api.main import app

    app.dependency_overrides[db_module.get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(db_module.get_db, None)


def auth_headers(email):
    return {"x-auth-request-email": email}


def identity_of(user):
    return IdentityData(user_id=user.id, company_id=user.company_id, email=user.email)


# === Factories ===


@pytest.fixture
def make_company(db_session):
    def _make(name=None, roles=(), status=CompanyStatus.ACTIVE, shortname=None, bpn=None):
        company = models.Company(
            name=name or f"Company {uuid.uuid4().hex[:6]}",
            shortname=shortname,
            business_partner_number=bpn,
            company_status=status,
        )
        db_session.add(company)
        db_session.flush()
        for role in roles:
            db_session.add(models.CompanyAssignedRole(company_id=company.id, company_role=role))
        db_session.commit()
        return company
    return _make


@pytest.fixture
def make_user(db_session):
    def _make(company, email=None, firstname="Test", lastname="User", status=UserStatus.ACTIVE):
        user = models.CompanyUser(
            company_id=company.id,
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            firstname=firstname,
            lastname=lastname,
            user_status=status,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def make_process(db_session):
    def _make(process_type=ProcessType.PARTNER_REGISTRATION, steps=(), lock_expiry_date=None):
        process = models.Process(process_type=process_type, version=uuid.uuid4(), lock_expiry_date=lock_expiry_date)
        db_session.add(process)
        db_session.flush()
        for step in steps:
            step_type, step_status = step if isinstance(step, tuple) else (step, ProcessStepStatus.TODO)
            db_session.add(models.ProcessStep(
                process_step_type=step_type,
                process_step_status=step_status,
                process_id=process.id,
            ))
        db_session.commit()
        return process
    return _make


@pytest.fixture
def make_application(db_session):
    def _make(
        company,
        status=ApplicationStatus.CREATED,
        application_type=ApplicationType.EXTERNAL,
        onboarding_service_provider=None,
    ):
        application = models.CompanyApplication(
            company_id=company.id,
            application_status=status,
            company_application_type=application_type,
            onboarding_service_provider_id=onboarding_service_provider.id if onboarding_service_provider else None,
        )
        db_session.add(application)
        db_session.commit()
        return application
    return _make


@pytest.fixture
def make_registration(db_session):
    def _make(company, osp, application, process=None, external_id=None, callback_url=None):
        if callback_url is not None:
            db_session.add(models.OnboardingServiceProviderDetail(company_id=osp.id, callback_url=callback_url))
        registration = models.NetworkRegistration(
            external_id=external_id or f"ext-{uuid.uuid4().hex[:8]}",
            company_id=company.id,
            onboarding_service_provider_id=osp.id,
            application_id=application.id,
            process_id=process.id if process else None,
        )
        db_session.add(registration)
        db_session.commit()
        return registration
    return _make


@pytest.fixture
def make_agreement(db_session):
    def _make(name="Terms", roles=(), offer=None, status=AgreementStatus.ACTIVE, link=None):
        agreement = models.Agreement(name=name, agreement_status=status, agreement_link=link)
        db_session.add(agreement)
        db_session.flush()
        for role in roles:
            db_session.add(models.AgreementAssignedCompanyRole(agreement_id=agreement.id, company_role=role))
        if offer is not None:
            db_session.add(models.AgreementAssignedOffer(agreement_id=agreement.id, offer_id=offer.id))
        db_session.commit()
        return agreement
    return _make


@pytest.fixture
def make_offer(db_session):
    def _make(
        offer_type=OfferType.APP,
        name="Offer",
        provider_company=None,
        sales_manager=None,
        status=OfferStatus.ACTIVE,
        contact_email="provider@example.com",
        price=None,
    ):
        offer = models.Offer(
            offer_type=offer_type,
            name=name,
            provider=provider_company.name if provider_company else "Provider",
            provider_company_id=provider_company.id if provider_company else None,
            sales_manager_id=sales_manager.id if sales_manager else None,
            offer_status=status,
            contact_email=contact_email,
        )
        db_session.add(offer)
        db_session.flush()
        if price is not None:
            license_ = models.OfferLicense(licensetext=price)
            db_session.add(license_)
            db_session.flush()
            db_session.add(models.OfferAssignedLicense(offer_id=offer.id, offer_license_id=license_.id))
        db_session.commit()
        return offer
    return _make


@pytest.fixture
def make_subscription(db_session):
    def _make(offer, company, requester, status=SubscriptionStatus.PENDING, process=None):
        subscription = models.OfferSubscription(
            offer_id=offer.id,
            company_id=company.id,
            requester_id=requester.id,
            offer_subscription_status=status,
            process_id=process.id if process else None,
        )
        db_session.add(subscription)
        db_session.commit()
        return subscription
    return _make


@pytest.fixture
def make_language(db_session):
    def _make(short_name, long_name=None):
        language = models.Language(short_name=short_name, long_name=long_name or short_name)
        db_session.add(language)
        db_session.commit()
        return language
    return _make


@pytest.fixture
def osp_setup(make_company, make_user, make_application, make_process, make_registration):
    """An OSP-registered company with a CREATED application and its registration process."""
    def _make(steps=(), status=ApplicationStatus.CREATED, callback_url=None, with_process=True):
        osp = make_company(name="OSP", roles=[CompanyRole.ONBOARDING_SERVICE_PROVIDER])
        osp_user = make_user(osp)
        company = make_company(name="Partner", status=CompanyStatus.PENDING)
        user = make_user(company)
        application = make_application(company, status=status, onboarding_service_provider=osp)
        process = make_process(ProcessType.PARTNER_REGISTRATION, steps) if with_process else None
        registration = make_registration(company, osp, application, process, callback_url=callback_url)
        return {
            "osp": osp,
            "osp_user": osp_user,
            "company": company,
            "user": user,
            "application": application,
            "process": process,
            "registration": registration,
        }
    return _make
