import uuid
from datetime import datetime, timezone

import pytest

from portal.db import models, schemas
from portal.db.enums import (
    ApplicationStatus,
    ChecklistEntryStatus,
    ChecklistEntryType,
    ConsentStatus,
    NotificationType,
    OfferType,
    ProcessStepType,
)
from portal.db.repositories import consents as consent_repo
from portal.errors import UnexpectedConditionException
from portal.processes.application_checklist import create_initial_checklist, get_initial_process_step_types
from portal.services.notification_service import NotificationService, subscription_content


def test_create_notifications_deduplicates_receivers(db_session, make_company, make_user):
    receiver = make_user(make_company())
    service = NotificationService(db_session)

    created = service.create_notifications([receiver.id, receiver.id], NotificationType.WELCOME, content={"x": 1})
    db_session.commit()

    assert len(created) == 1
    assert service.get_unread_count(receiver.id) == 1


def test_mark_notification_read_only_for_receiver(db_session, make_company, make_user):
    company = make_company()
    receiver = make_user(company)
    other = make_user(company)
    service = NotificationService(db_session)
    notification = service.create_notification(receiver.id, NotificationType.SERVICE_REQUEST)
    db_session.commit()

    assert service.mark_notification_read(notification.id, other.id) is False
    assert service.mark_notification_read(uuid.uuid4(), receiver.id) is False
    assert service.mark_notification_read(notification.id, receiver.id) is True
    assert service.get_unread_count(receiver.id) == 0
    assert len(service.get_user_notifications(receiver.id, unread_only=True)) == 0


def test_notification_stats(db_session, make_company, make_user):
    receiver = make_user(make_company())
    service = NotificationService(db_session)
    first = service.create_notification(receiver.id, NotificationType.WELCOME)
    service.create_notification(receiver.id, NotificationType.APP_SUBSCRIPTION_REQUEST)
    db_session.commit()
    service.mark_notification_read(first.id, receiver.id)

    stats = service.get_stats(receiver.id)
    assert stats.unread_count == 1
    assert stats.total_notifications == 2
    assert len(stats.recent_notifications) == 2


def test_subscription_content_stringifies_ids():
    offer_id = uuid.uuid4()
    subscription_id = uuid.uuid4()
    content = subscription_content(offer_id, "Fleet Tracker", "Customer Co", subscriptionId=subscription_id)
    assert content["offerId"] == str(offer_id)
    assert content["subscriptionId"] == str(subscription_id)
    assert content["requestorCompanyName"] == "Customer Co"


def test_initial_checklist_without_bpn(db_session, make_company, make_application):
    application = make_application(make_company(), status=ApplicationStatus.SUBMITTED)

    checklist = create_initial_checklist(db_session, application.id)

    assert {entry_type for entry_type, _ in checklist} == set(ChecklistEntryType)
    assert all(status == ChecklistEntryStatus.TO_DO for _, status in checklist)
    assert get_initial_process_step_types(checklist) == [
        ProcessStepType.MANUAL_VERIFY_REGISTRATION,
        ProcessStepType.CREATE_BUSINESS_PARTNER_NUMBER_PUSH,
        ProcessStepType.CREATE_BUSINESS_PARTNER_NUMBER_MANUAL,
        ProcessStepType.MANUAL_DECLINE_APPLICATION,
    ]


def test_initial_checklist_keeps_existing_entries(db_session, make_company, make_application):
    application = make_application(make_company(bpn="BPNL000000000001"))
    db_session.add(models.ApplicationChecklistEntry(
        application_id=application.id,
        entry_type=ChecklistEntryType.REGISTRATION_VERIFICATION,
        entry_status=ChecklistEntryStatus.DONE,
    ))
    db_session.commit()

    checklist = dict(create_initial_checklist(db_session, application.id))
    db_session.commit()

    assert checklist[ChecklistEntryType.REGISTRATION_VERIFICATION] == ChecklistEntryStatus.DONE
    assert checklist[ChecklistEntryType.BUSINESS_PARTNER_NUMBER] == ChecklistEntryStatus.DONE
    assert get_initial_process_step_types(checklist.items()) == [ProcessStepType.MANUAL_DECLINE_APPLICATION]
    assert db_session.query(models.ApplicationChecklistEntry).count() == len(ChecklistEntryType)


def test_initial_checklist_unknown_application(db_session):
    with pytest.raises(UnexpectedConditionException, match="does not exist"):
        create_initial_checklist(db_session, uuid.uuid4())


def test_add_attach_and_modify_consents(db_session, make_company, make_user, make_agreement):
    company = make_company()
    user = make_user(company)
    kept = make_agreement(name="Kept")
    changed = make_agreement(name="Changed")
    added = make_agreement(name="Added")
    existing = consent_repo.create_consents(db_session, [
        (kept.id, company.id, user.id, ConsentStatus.ACTIVE),
        (changed.id, company.id, user.id, ConsentStatus.ACTIVE),
    ])
    db_session.commit()
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)

    consents, created = consent_repo.add_attach_and_modify_consents(
        db_session,
        existing,
        [
            schemas.AgreementConsentData(agreement_id=kept.id, consent_status=ConsentStatus.ACTIVE),
            schemas.AgreementConsentData(agreement_id=changed.id, consent_status=ConsentStatus.INACTIVE),
            schemas.AgreementConsentData(agreement_id=added.id, consent_status=ConsentStatus.ACTIVE),
        ],
        company.id,
        user.id,
        now,
    )
    db_session.commit()

    assert [c.agreement_id for c in created] == [added.id]
    statuses = {c.agreement_id: c.consent_status for c in consents}
    assert statuses == {
        kept.id: ConsentStatus.ACTIVE,
        changed.id: ConsentStatus.INACTIVE,
        added.id: ConsentStatus.ACTIVE,
    }
    assert db_session.query(models.Consent).count() == 3


def test_add_attach_and_modify_offer_consents_assigns_new_consents(db_session, make_company, make_user, make_agreement, make_offer):
    company = make_company()
    user = make_user(company)
    offer = make_offer(offer_type=OfferType.SERVICE)
    agreement = make_agreement(name="Service terms", offer=offer)
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    data = [schemas.AgreementConsentData(agreement_id=agreement.id, consent_status=ConsentStatus.ACTIVE)]

    consents = consent_repo.add_attach_and_modify_offer_consents(db_session, offer.id, data, company.id, user.id, now)
    db_session.commit()

    assert len(consents) == 1
    assert [c.id for c in consent_repo.get_consents_for_offer(db_session, offer.id, company.id)] == [consents[0].id]
    detail = consent_repo.get_consent_detail_data(db_session, consents[0].id, OfferType.SERVICE)
    assert detail.agreement_name == "Service terms"
    assert consent_repo.get_consent_detail_data(db_session, consents[0].id, OfferType.APP) is None

    again = consent_repo.add_attach_and_modify_offer_consents(db_session, offer.id, data, company.id, user.id, now)
    db_session.commit()
    assert [c.id for c in again] == [consents[0].id]
    assert db_session.query(models.ConsentAssignedOffer).count() == 1



def test_consent_detail_follows_the_agreement_offer_type(db_session, make_company, make_user, make_agreement, make_offer):
    company = make_company()
    user = make_user(company)
    service_terms = make_agreement(name="Service terms", offer=make_offer(offer_type=OfferType.SERVICE))
    general_terms = make_agreement(name="General terms")
    offered, unassigned = consent_repo.create_consents(db_session, [
        (service_terms.id, company.id, user.id, ConsentStatus.ACTIVE),
        (general_terms.id, company.id, user.id, ConsentStatus.ACTIVE),
    ])
    db_session.commit()

    detail = consent_repo.get_consent_detail_data(db_session, offered.id, OfferType.SERVICE)
    assert (detail.company_name, detail.agreement_name) == (company.name, "Service terms")
    assert consent_repo.get_consent_detail_data(db_session, offered.id, OfferType.APP) is None
    assert consent_repo.get_consent_detail_data(db_session, unassigned.id, OfferType.SERVICE) is None

def test_attach_and_modify_and_remove_consents(db_session, make_company, make_user, make_agreement):
    company = make_company()
    user = make_user(company)
    first, second = make_agreement(name="First"), make_agreement(name="Second")
    consents = consent_repo.create_consents(db_session, [
        (first.id, company.id, user.id, ConsentStatus.ACTIVE),
        (second.id, company.id, user.id, ConsentStatus.ACTIVE),
    ])
    db_session.commit()

    def deactivate(consent):
        consent.consent_status = ConsentStatus.INACTIVE

    assert consent_repo.attach_and_modify_consents(db_session, [], deactivate) == []
    modified = consent_repo.attach_and_modify_consents(db_session, [consents[0].id], deactivate)
    db_session.commit()
    assert [c.consent_status for c in modified] == [ConsentStatus.INACTIVE]
    assert consents[1].consent_status == ConsentStatus.ACTIVE

    consent_repo.remove_consents(db_session, [consents[1]])
    db_session.commit()
    assert [c.agreement_id for c in db_session.query(models.Consent).all()] == [first.id]
