import uuid
from unittest.mock import patch

import pytest

from portal.db import models, schemas
from portal.db.enums import (
    ApplicationStatus,
    ApplicationType,
    ChecklistEntryStatus,
    ChecklistEntryType,
    CompanyRole,
    CompanyStatus,
    ConsentStatus,
    InvitationStatus,
    ProcessStepStatus,
    ProcessStepType,
    ProcessType,
    UserStatus,
)
from portal.db.repositories import audits as audit_repo
from portal.db.repositories import processes as process_repo
from portal.errors import ConflictException, ControllerArgumentException, ForbiddenException, NotFoundException
from portal.identity import IdentityData
from portal.services.network_service import NetworkService

from tests.conftest import identity_of


def _submit_data(roles, agreements, status=ConsentStatus.ACTIVE):
    return schemas.PartnerSubmitData(
        company_roles=roles,
        agreements=[schemas.AgreementConsentData(agreement_id=a.id, consent_status=status) for a in agreements],
    )


# === submit ===


def test_submit_unknown_company_is_not_found(db_session):
    identity = IdentityData(user_id=uuid.uuid4(), company_id=uuid.uuid4(), email="x@example.com")
    with pytest.raises(NotFoundException) as exc:
        NetworkService(db_session).submit(identity, _submit_data([], []))
    assert exc.value.message == "NETWORK_COMPANY_NOT_FOUND"


def test_submit_requires_exactly_one_application(db_session, make_company, make_user, make_application):
    company = make_company()
    user = make_user(company)
    make_application(company)
    make_application(company)
    with pytest.raises(ConflictException) as exc:
        NetworkService(db_session).submit(identity_of(user), _submit_data([], []))
    assert exc.value.message == "NETWORK_CONFLICT_ONLY_ONE_APPLICATION_PER_COMPANY"


def test_submit_requires_created_application(db_session, osp_setup):
    setup = osp_setup(status=ApplicationStatus.VERIFY)
    with pytest.raises(ConflictException) as exc:
        NetworkService(db_session).submit(identity_of(setup["user"]), _submit_data([], []))
    assert exc.value.message == "NETWORK_CONFLICT_APP_NOT_CREATED_STATE"


def test_submit_missing_role_agreement(db_session, osp_setup, make_agreement):
    setup = osp_setup()
    make_agreement("Participant terms", roles=[CompanyRole.ACTIVE_PARTICIPANT])
    with pytest.raises(ControllerArgumentException) as exc:
        NetworkService(db_session).submit(
            identity_of(setup["user"]), _submit_data([CompanyRole.ACTIVE_PARTICIPANT], [])
        )
    assert exc.value.message == "NETWORK_ARG_ALL_AGREEMNTS_COMPANY_SHOULD_AGREED"


def test_submit_inactive_consent_rejected(db_session, osp_setup, make_agreement):
    setup = osp_setup()
    agreement = make_agreement("Participant terms", roles=[CompanyRole.ACTIVE_PARTICIPANT])
    with pytest.raises(ControllerArgumentException) as exc:
        NetworkService(db_session).submit(
            identity_of(setup["user"]),
            _submit_data([CompanyRole.ACTIVE_PARTICIPANT], [agreement], ConsentStatus.INACTIVE),
        )
    assert exc.value.message == "NETWORK_ARG_NOT_ACTIVE_AGREEMENTS"



def test_submit_accepts_declined_optional_agreement(db_session, osp_setup, make_agreement):
    setup = osp_setup()
    required = make_agreement("Participant terms", roles=[CompanyRole.ACTIVE_PARTICIPANT])
    optional = make_agreement("Provider terms", roles=[CompanyRole.APP_PROVIDER])
    data = schemas.PartnerSubmitData(
        company_roles=[CompanyRole.ACTIVE_PARTICIPANT],
        agreements=[
            schemas.AgreementConsentData(agreement_id=required.id, consent_status=ConsentStatus.ACTIVE),
            schemas.AgreementConsentData(agreement_id=optional.id, consent_status=ConsentStatus.INACTIVE),
        ],
    )

    NetworkService(db_session).submit(identity_of(setup["user"]), data)

    application = db_session.get(models.CompanyApplication, setup["application"].id)
    assert application.application_status == ApplicationStatus.SUBMITTED
    consents = db_session.query(models.Consent).filter(models.Consent.company_id == setup["company"].id).all()
    assert {(c.agreement_id, c.consent_status) for c in consents} == {
        (required.id, ConsentStatus.ACTIVE),
        (optional.id, ConsentStatus.INACTIVE),
    }

def test_submit_with_callback_requires_registration_process(db_session, osp_setup):
    setup = osp_setup(callback_url="https://osp.example.com/callback", with_process=False)
    with pytest.raises(ConflictException) as exc:
        NetworkService(db_session).submit(identity_of(setup["user"]), _submit_data([], []))
    assert exc.value.message == "NETWORK_CONFLICT_PROCESS_MUST_EXIST"


def test_submit_success_persists_everything_in_one_commit(db_session, osp_setup, make_agreement):
    setup = osp_setup(
        steps=[ProcessStepType.SYNCHRONIZE_USER],
        callback_url="https://osp.example.com/callback",
    )
    agreement = make_agreement("Participant terms", roles=[CompanyRole.ACTIVE_PARTICIPANT])
    company_id = setup["company"].id
    application_id = setup["application"].id
    registration_process_id = setup["process"].id

    with patch.object(db_session, "commit", wraps=db_session.commit) as commit:
        NetworkService(db_session).submit(
            identity_of(setup["user"]), _submit_data([CompanyRole.ACTIVE_PARTICIPANT], [agreement])
        )
    assert commit.call_count == 1

    application = db_session.get(models.CompanyApplication, application_id)
    assert application.application_status == ApplicationStatus.SUBMITTED
    assert application.checklist_process_id is not None

    consents = db_session.query(models.Consent).filter(models.Consent.company_id == company_id).all()
    assert [(c.agreement_id, c.consent_status) for c in consents] == [(agreement.id, ConsentStatus.ACTIVE)]

    roles = {r.company_role for r in db_session.query(models.CompanyAssignedRole).filter_by(company_id=company_id)}
    assert roles == {CompanyRole.ACTIVE_PARTICIPANT}

    checklist = {
        e.entry_type: e.entry_status
        for e in db_session.query(models.ApplicationChecklistEntry).filter_by(application_id=application_id)
    }
    assert set(checklist) == set(ChecklistEntryType)
    assert all(status == ChecklistEntryStatus.TO_DO for status in checklist.values())

    checklist_process = db_session.get(models.Process, application.checklist_process_id)
    assert checklist_process.process_type == ProcessType.APPLICATION_CHECKLIST
    checklist_steps = {s.process_step_type for s in process_repo.get_process_steps(db_session, checklist_process.id)}
    assert checklist_steps == {
        ProcessStepType.MANUAL_VERIFY_REGISTRATION,
        ProcessStepType.CREATE_BUSINESS_PARTNER_NUMBER_PUSH,
        ProcessStepType.CREATE_BUSINESS_PARTNER_NUMBER_MANUAL,
        ProcessStepType.MANUAL_DECLINE_APPLICATION,
    }

    registration_steps = {
        s.process_step_type for s in process_repo.get_process_steps(db_session, registration_process_id)
    }
    assert ProcessStepType.TRIGGER_CALLBACK_OSP_SUBMITTED in registration_steps

    audit_actions = [a.action_type for a in db_session.query(models.AuditLog).all()]
    assert audit_actions == ["application_submit"]


def test_submit_company_with_bpn_gets_bpn_entry_done(db_session, make_company, make_user, make_application):
    company = make_company(bpn="BPNL000000000001")
    user = make_user(company)
    application = make_application(company, application_type=ApplicationType.INTERNAL)

    NetworkService(db_session).submit(identity_of(user), _submit_data([], []))

    entries = {
        e.entry_type: e.entry_status
        for e in db_session.query(models.ApplicationChecklistEntry).filter_by(application_id=application.id)
    }
    assert entries[ChecklistEntryType.BUSINESS_PARTNER_NUMBER] == ChecklistEntryStatus.DONE
    steps = {
        s.process_step_type
        for s in process_repo.get_process_steps(db_session, db_session.get(models.CompanyApplication, application.id).checklist_process_id)
    }
    assert ProcessStepType.CREATE_BUSINESS_PARTNER_NUMBER_PUSH not in steps


# === decline_osp ===


def test_decline_unknown_application(db_session, make_company, make_user):
    user = make_user(make_company())
    with pytest.raises(NotFoundException) as exc:
        NetworkService(db_session).decline_osp(identity_of(user), uuid.uuid4(), schemas.DeclineOspData())
    assert exc.value.message == "NETWORK_COMPANY_APPLICATION_NOT_EXIST"


def test_decline_other_company_is_forbidden(db_session, osp_setup, make_company, make_user):
    setup = osp_setup(steps=[ProcessStepType.MANUAL_DECLINE_OSP])
    stranger = make_user(make_company())
    with pytest.raises(ForbiddenException) as exc:
        NetworkService(db_session).decline_osp(identity_of(stranger), setup["application"].id, schemas.DeclineOspData())
    assert exc.value.message == "NETWORK_FORBIDDEN_USER_NOT_ALLOWED_DECLINE_APPLICATION"


def test_decline_internal_application_conflict(db_session, make_company, make_user, make_application):
    company = make_company()
    user = make_user(company)
    application = make_application(company, application_type=ApplicationType.INTERNAL)
    with pytest.raises(ConflictException) as exc:
        NetworkService(db_session).decline_osp(identity_of(user), application.id, schemas.DeclineOspData())
    assert exc.value.message == "NETWORK_CONFLICT_EXTERNAL_REGISTRATIONS_DECLINED"


def test_decline_submitted_application_conflict(db_session, osp_setup):
    setup = osp_setup(steps=[ProcessStepType.MANUAL_DECLINE_OSP], status=ApplicationStatus.SUBMITTED)
    with pytest.raises(ConflictException) as exc:
        NetworkService(db_session).decline_osp(identity_of(setup["user"]), setup["application"].id, schemas.DeclineOspData())
    assert exc.value.message == "NETWORK_CONFLICT_CHECK_APPLICATION_STATUS"


def test_decline_without_eligible_step_conflict(db_session, osp_setup):
    setup = osp_setup(steps=[ProcessStepType.SYNCHRONIZE_USER])
    with pytest.raises(ConflictException):
        NetworkService(db_session).decline_osp(identity_of(setup["user"]), setup["application"].id, schemas.DeclineOspData())


def test_decline_success_updates_entities_and_steps(db_session, osp_setup, make_user):
    setup = osp_setup(steps=[
        ProcessStepType.MANUAL_DECLINE_OSP,
        ProcessStepType.SYNCHRONIZE_USER,
        ProcessStepType.TRIGGER_CALLBACK_OSP_SUBMITTED,
        ProcessStepType.REMOVE_KEYCLOAK_USERS,
    ])
    company = setup["company"]
    invited = make_user(company)
    db_session.add_all([
        models.Invitation(company_application_id=setup["application"].id, company_user_id=setup["user"].id),
        models.Invitation(
            company_application_id=setup["application"].id,
            company_user_id=invited.id,
            invitation_status=InvitationStatus.ACCEPTED,
        ),
    ])
    db_session.commit()
    process_id = setup["process"].id
    version_before = setup["process"].version
    step_count_before = len(process_repo.get_process_steps(db_session, process_id))

    with patch.object(db_session, "commit", wraps=db_session.commit) as commit:
        NetworkService(db_session).decline_osp(
            identity_of(setup["user"]), setup["application"].id, schemas.DeclineOspData(message="not eligible")
        )
    assert commit.call_count == 1

    application = db_session.get(models.CompanyApplication, setup["application"].id)
    assert application.application_status == ApplicationStatus.CANCELLED_BY_CUSTOMER
    assert application.decline_message == "not eligible"
    assert db_session.get(models.Company, company.id).company_status == CompanyStatus.REJECTED

    statuses = sorted(i.invitation_status for i in db_session.query(models.Invitation).all())
    assert statuses == sorted([InvitationStatus.DECLINED, InvitationStatus.ACCEPTED])
    users = db_session.query(models.CompanyUser).filter_by(company_id=company.id).all()
    assert users and all(u.user_status == UserStatus.INACTIVE for u in users)

    steps = process_repo.get_process_steps(db_session, process_id)
    assert len(steps) == step_count_before
    by_type = {s.process_step_type: s.process_step_status for s in steps}
    assert by_type == {
        ProcessStepType.MANUAL_DECLINE_OSP: ProcessStepStatus.DONE,
        ProcessStepType.SYNCHRONIZE_USER: ProcessStepStatus.SKIPPED,
        ProcessStepType.TRIGGER_CALLBACK_OSP_SUBMITTED: ProcessStepStatus.SKIPPED,
        ProcessStepType.REMOVE_KEYCLOAK_USERS: ProcessStepStatus.TODO,
    }
    assert db_session.get(models.Process, process_id).version != version_before

    entries = audit_repo.get_audit_logs_for_target(db_session, "company_application", setup["application"].id)
    assert [(e.action_type, e.metadata_json) for e in entries] == [("application_decline", {"message": "not eligible"})]


# === retrigger ===


def test_retrigger_schedules_next_step(db_session, osp_setup):
    setup = osp_setup(steps=[ProcessStepType.RETRIGGER_CALLBACK_OSP_SUBMITTED])
    NetworkService(db_session).retrigger_process_step(
        identity_of(setup["osp_user"]),
        setup["registration"].external_id,
        ProcessStepType.RETRIGGER_CALLBACK_OSP_SUBMITTED,
    )
    by_type = {s.process_step_type: s.process_step_status for s in process_repo.get_process_steps(db_session, setup["process"].id)}
    assert by_type[ProcessStepType.RETRIGGER_CALLBACK_OSP_SUBMITTED] == ProcessStepStatus.DONE
    assert by_type[ProcessStepType.TRIGGER_CALLBACK_OSP_SUBMITTED] == ProcessStepStatus.TODO


def test_retrigger_unknown_external_id(db_session, make_company, make_user):
    user = make_user(make_company())
    with pytest.raises(NotFoundException) as exc:
        NetworkService(db_session).retrigger_process_step(
            identity_of(user), "missing", ProcessStepType.RETRIGGER_SYNCHRONIZE_USER
        )
    assert exc.value.message == "NETWORK_NOT_FOUND_EXTERNAL_ID"


def test_retrigger_rejects_non_retrigger_step(db_session, make_company, make_user):
    user = make_user(make_company())
    with pytest.raises(ConflictException):
        NetworkService(db_session).retrigger_process_step(identity_of(user), "any", ProcessStepType.SYNCHRONIZE_USER)
