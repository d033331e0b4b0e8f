"""
Partner network registration workflow.

Companies registered by an onboarding service provider (OSP) submit their
application here, and the OSP may decline an application that has not been
submitted yet. Both operations touch several entities and persist them with a
single commit.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, Set

from sqlalchemy.orm import Session

from portal import audit
from portal.db import schemas
from portal.db.enums import (
    ApplicationStatus,
    ApplicationType,
    CompanyStatus,
    ConsentStatus,
    InvitationStatus,
    ProcessStepStatus,
    ProcessStepType,
    ProcessType,
    UserStatus,
)
from portal.db.models import now_utc
from portal.db.repositories import companies as company_repo
from portal.db.repositories import applications as application_repo
from portal.db.repositories import consents as consent_repo
from portal.db.repositories import network as network_repo
from portal.db.repositories import processes as process_repo
from portal.errors import (
    ConflictException,
    ControllerArgumentException,
    ForbiddenException,
    NetworkErrors,
    NotFoundException,
)
from portal.identity import IdentityData
from portal.processes import application_checklist
from portal.processes.library import create_manual_process_data

logger = logging.getLogger(__name__)

DECLINABLE_STATUSES = (
    ApplicationStatus.CREATED,
    ApplicationStatus.ADD_COMPANY_DATA,
    ApplicationStatus.INVITE_USER,
    ApplicationStatus.SELECT_COMPANY_ROLE,
    ApplicationStatus.UPLOAD_DOCUMENTS,
    ApplicationStatus.VERIFY,
)

RETRIGGER_STEPS: Dict[ProcessStepType, ProcessStepType] = {
    ProcessStepType.RETRIGGER_SYNCHRONIZE_USER: ProcessStepType.SYNCHRONIZE_USER,
    ProcessStepType.RETRIGGER_CALLBACK_OSP_SUBMITTED: ProcessStepType.TRIGGER_CALLBACK_OSP_SUBMITTED,
    ProcessStepType.RETRIGGER_CALLBACK_OSP_APPROVED: ProcessStepType.TRIGGER_CALLBACK_OSP_APPROVED,
    ProcessStepType.RETRIGGER_CALLBACK_OSP_DECLINED: ProcessStepType.TRIGGER_CALLBACK_OSP_DECLINED,
    ProcessStepType.RETRIGGER_REMOVE_KEYCLOAK_USERS: ProcessStepType.REMOVE_KEYCLOAK_USERS,
}


class NetworkService:
    def __init__(self, db: Session):
        self.db = db

    def submit(self, identity: IdentityData, data: schemas.PartnerSubmitData) -> None:
        submit_data = network_repo.get_submit_data(self.db, identity.company_id)
        if submit_data is None:
            raise NotFoundException(NetworkErrors.NETWORK_COMPANY_NOT_FOUND)
        if len(submit_data.applications) != 1:
            raise ConflictException(NetworkErrors.NETWORK_CONFLICT_ONLY_ONE_APPLICATION_PER_COMPANY)
        application_data = submit_data.applications[0]
        if application_data.status != ApplicationStatus.CREATED:
            raise ConflictException(NetworkErrors.NETWORK_CONFLICT_APP_NOT_CREATED_STATE)

        required: Set[uuid.UUID] = {
            agreement_id
            for role in data.company_roles
            for agreement_id in submit_data.role_agreement_ids.get(role, ())
        }
        submitted = {agreement.agreement_id: agreement.consent_status for agreement in data.agreements}
        if required - submitted.keys():
            raise ControllerArgumentException(NetworkErrors.NETWORK_ARG_ALL_AGREEMNTS_COMPANY_SHOULD_AGREED)
        if any(submitted[agreement_id] != ConsentStatus.ACTIVE for agreement_id in required):
            raise ControllerArgumentException(NetworkErrors.NETWORK_ARG_NOT_ACTIVE_AGREEMENTS)
        if application_data.callback_url is not None and submit_data.process_id is None:
            raise ConflictException(NetworkErrors.NETWORK_CONFLICT_PROCESS_MUST_EXIST)

        consent_repo.create_consents(
            self.db,
            [
                (agreement.agreement_id, identity.company_id, identity.user_id, agreement.consent_status)
                for agreement in data.agreements
            ],
        )
        company_repo.assign_company_roles(self.db, identity.company_id, data.company_roles)

        checklist_process = process_repo.create_process(self.db, ProcessType.APPLICATION_CHECKLIST)
        checklist = application_checklist.create_initial_checklist(self.db, application_data.application_id)
        steps = [
            (step_type, ProcessStepStatus.TODO, checklist_process.id)
            for step_type in application_checklist.get_initial_process_step_types(checklist)
        ]
        if application_data.callback_url is not None:
            steps.append((ProcessStepType.TRIGGER_CALLBACK_OSP_SUBMITTED, ProcessStepStatus.TODO, submit_data.process_id))
        process_repo.create_process_step_range(self.db, steps)

        application = application_repo.get_application(self.db, application_data.application_id)
        application.application_status = ApplicationStatus.SUBMITTED
        application.checklist_process_id = checklist_process.id
        application.last_editor_id = identity.user_id
        application.date_last_changed = now_utc()

        audit.log(
            self.db,
            identity=identity,
            target_id=application.id,
            action=audit.AuditAction.APPLICATION_SUBMIT,
            metadata={"company_roles": [role.value for role in data.company_roles]},
        )
        self.db.commit()
        logger.info(
            "application_submitted application_id=%s company_id=%s process_id=%s",
            application.id,
            identity.company_id,
            checklist_process.id,
        )

    def decline_osp(self, identity: IdentityData, application_id: uuid.UUID, data: schemas.DeclineOspData) -> None:
        decline_data = network_repo.get_decline_data(
            self.db,
            application_id,
            ApplicationType.EXTERNAL,
            DECLINABLE_STATUSES,
            identity.company_id,
        )
        if decline_data is None:
            raise NotFoundException(NetworkErrors.NETWORK_COMPANY_APPLICATION_NOT_EXIST)
        if not decline_data.is_same_company:
            raise ForbiddenException(NetworkErrors.NETWORK_FORBIDDEN_USER_NOT_ALLOWED_DECLINE_APPLICATION)
        if not decline_data.is_valid_type:
            raise ConflictException(NetworkErrors.NETWORK_CONFLICT_EXTERNAL_REGISTRATIONS_DECLINED)
        if not decline_data.is_valid_status:
            raise ConflictException(NetworkErrors.NETWORK_CONFLICT_CHECK_APPLICATION_STATUS)

        context = create_manual_process_data(
            decline_data.process_data,
            ProcessStepType.MANUAL_DECLINE_OSP,
            self.db,
            f"application {application_id}",
        )

        now = now_utc()
        application = application_repo.get_application(self.db, application_id)
        application.application_status = ApplicationStatus.CANCELLED_BY_CUSTOMER
        application.decline_message = data.message
        application.last_editor_id = identity.user_id
        application.date_last_changed = now

        company = decline_data.company
        company.company_status = CompanyStatus.REJECTED
        company.date_last_changed = now

        for invitation in decline_data.invitations:
            if invitation.invitation_status == InvitationStatus.PENDING:
                invitation.invitation_status = InvitationStatus.DECLINED
        for user in decline_data.users:
            user.user_status = UserStatus.INACTIVE
            user.date_last_changed = now

        context.skip_process_steps_except([ProcessStepType.REMOVE_KEYCLOAK_USERS])
        context.finalize_process_step()

        audit.log(
            self.db,
            identity=identity,
            target_id=application_id,
            action=audit.AuditAction.APPLICATION_DECLINE,
            metadata={"message": data.message} if data.message else None,
        )
        self.db.commit()
        logger.info("osp_declined application_id=%s company_id=%s", application_id, company.id)

    def retrigger_process_step(self, identity: IdentityData, external_id: str, process_step_type: ProcessStepType) -> None:
        next_step = RETRIGGER_STEPS.get(process_step_type)
        if next_step is None:
            raise ConflictException(f"Step {process_step_type.value} is not retriggerable")
        process_data = network_repo.get_registration_process_data(self.db, external_id)
        if process_data is None:
            raise NotFoundException(NetworkErrors.NETWORK_NOT_FOUND_EXTERNAL_ID)
        context = create_manual_process_data(
            process_data,
            process_step_type,
            self.db,
            f"externalId {external_id}",
        )
        context.schedule_process_steps([next_step])
        context.finalize_process_step()
        audit.log(
            self.db,
            action=audit.AuditAction.PROCESS_STEP_RETRIGGER,
            target_id=context.process.id,
            identity=identity,
            metadata={"process_step_type": process_step_type.value, "external_id": external_id},
        )
        self.db.commit()
        logger.info("process_step_retriggered external_id=%s step=%s", external_id, process_step_type.value)
