"""
Provider auto-setup configuration and offer subscription process retriggers.
"""
from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from portal import audit
from portal.db import schemas
from portal.db.enums import CompanyRole, ProcessStepType
from portal.db.models import now_utc
from portal.db.repositories import companies as company_repo
from portal.db.repositories import processes as process_repo
from portal.errors import ConflictException, ControllerArgumentException, ForbiddenException
from portal.identity import IdentityData
from portal.processes import offer_subscription
from portal.utils.settings import get_settings
from portal.utils.urls import is_https_url

logger = logging.getLogger(__name__)


def ensure_valid_https_url(url: Optional[str], param_name: str) -> None:
    if not is_https_url(url):
        raise ControllerArgumentException(f"url {url} must be a valid https url", param_name)


class SubscriptionConfigurationService:
    def __init__(self, db: Session):
        self.db = db

    def get_provider_company_details(self, company_id: uuid.UUID) -> schemas.ProviderDetailReturnData:
        company = company_repo.get_company(self.db, company_id)
        if company is None:
            raise ConflictException(f"Company {company_id} not found")
        if not company_repo.company_has_any_role(self.db, company_id, [CompanyRole.SERVICE_PROVIDER]):
            raise ForbiddenException(f"Company {company_id} is not a service-provider")
        detail = company_repo.get_provider_company_detail(self.db, company_id)
        if detail is None:
            return schemas.ProviderDetailReturnData(company_id=company_id)
        return schemas.ProviderDetailReturnData(
            id=detail.id,
            company_id=detail.company_id,
            url=detail.auto_setup_url,
            callback_url=detail.auto_setup_callback_url,
        )

    def set_provider_company_details(self, identity: IdentityData, data: schemas.ProviderDetailData) -> None:
        ensure_valid_https_url(data.url, "url")
        if data.callback_url is not None:
            ensure_valid_https_url(data.callback_url, "callback_url")
        max_length = get_settings().provider_url_max_length
        if len(data.url) > max_length:
            raise ControllerArgumentException(f"the maximum allowed length is {max_length} characters", "url")

        now = now_utc()
        detail = company_repo.get_provider_company_detail(self.db, identity.company_id)
        if detail is None:
            if company_repo.get_company(self.db, identity.company_id) is None:
                raise ConflictException(f"Company {identity.company_id} not found")
            if not company_repo.company_has_any_role(
                self.db, identity.company_id, [CompanyRole.APP_PROVIDER, CompanyRole.SERVICE_PROVIDER]
            ):
                raise ForbiddenException(f"Company {identity.company_id} is not an app- or service-provider")
            detail = company_repo.create_provider_company_detail(
                self.db,
                identity.company_id,
                data.url,
                auto_setup_callback_url=data.callback_url,
                last_editor_id=identity.user_id,
            )
        else:
            detail.auto_setup_url = data.url
            detail.auto_setup_callback_url = data.callback_url
            detail.last_editor_id = identity.user_id
        detail.date_last_changed = now

        audit.log(
            self.db,
            action=audit.AuditAction.PROVIDER_DETAILS_SET,
            target_id=detail.id,
            identity=identity,
        )
        self.db.commit()

    def retrigger_provider(self, subscription_id: uuid.UUID) -> None:
        self._trigger_process_step(subscription_id, ProcessStepType.RETRIGGER_PROVIDER, must_be_pending=True)

    def retrigger_create_client(self, subscription_id: uuid.UUID) -> None:
        self._trigger_process_step(
            subscription_id, ProcessStepType.RETRIGGER_OFFERSUBSCRIPTION_CLIENT_CREATION, must_be_pending=True
        )

    def retrigger_create_technical_user(self, subscription_id: uuid.UUID) -> None:
        self._trigger_process_step(
            subscription_id, ProcessStepType.RETRIGGER_OFFERSUBSCRIPTION_TECHNICALUSER_CREATION, must_be_pending=True
        )

    def retrigger_provider_callback(self, subscription_id: uuid.UUID) -> None:
        self._trigger_process_step(subscription_id, ProcessStepType.RETRIGGER_PROVIDER_CALLBACK, must_be_pending=False)

    def _trigger_process_step(self, subscription_id: uuid.UUID, step_to_trigger: ProcessStepType, must_be_pending: bool) -> None:
        next_step = offer_subscription.get_step_to_retrigger(step_to_trigger)
        context = offer_subscription.verify_subscription_and_process_steps(
            self.db, subscription_id, step_to_trigger, None, must_be_pending
        )
        offer_subscription.finalize_process_steps(context, [next_step])
        self.db.commit()
        logger.info(
            "process_step_retriggered subscription_id=%s step=%s next=%s",
            subscription_id,
            step_to_trigger.value,
            next_step.value,
        )

    def get_process_steps_for_subscription(self, subscription_id: uuid.UUID) -> List[schemas.ProcessStepData]:
        return [
            schemas.ProcessStepData.model_validate(step)
            for step in process_repo.get_process_steps_by_subscription(self.db, subscription_id)
        ]
