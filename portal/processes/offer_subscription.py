"""
Offer subscription process: provider trigger, client and technical user
creation, provider callback, and their manual retriggers.
"""
from __future__ import annotations

import uuid
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.enums import ProcessStepStatus, ProcessStepType, ProcessType, SubscriptionStatus
from portal.db.repositories import offer_subscriptions as subscription_repo
from portal.db.repositories import processes as process_repo
from portal.errors import ConflictException, NotFoundException
from portal.processes.library import ManualProcessStepData, create_manual_process_data

_RETRIGGER_STEPS = {
    ProcessStepType.RETRIGGER_PROVIDER: ProcessStepType.TRIGGER_PROVIDER,
    ProcessStepType.RETRIGGER_OFFERSUBSCRIPTION_CLIENT_CREATION: ProcessStepType.OFFERSUBSCRIPTION_CLIENT_CREATION,
    ProcessStepType.RETRIGGER_OFFERSUBSCRIPTION_TECHNICALUSER_CREATION: ProcessStepType.OFFERSUBSCRIPTION_TECHNICALUSER_CREATION,
    ProcessStepType.RETRIGGER_PROVIDER_CALLBACK: ProcessStepType.TRIGGER_PROVIDER_CALLBACK,
}


def get_step_to_retrigger(process_step_type: ProcessStepType) -> ProcessStepType:
    try:
        return _RETRIGGER_STEPS[process_step_type]
    except KeyError:
        raise ConflictException(f"Step {process_step_type.value} is not retriggerable") from None


def verify_subscription_and_process_steps(
    db: Session,
    subscription_id: uuid.UUID,
    process_step_type: ProcessStepType,
    additional_step_types: Optional[Iterable[ProcessStepType]],
    must_be_pending: bool,
) -> ManualProcessStepData:
    step_types = [process_step_type, *(additional_step_types or ())]
    result = subscription_repo.get_subscription_process_data(db, subscription_id, step_types)
    if result is None:
        raise NotFoundException(f"offer subscription {subscription_id} does not exist")
    status, process_data = result
    if must_be_pending and status != SubscriptionStatus.PENDING:
        raise ConflictException(f"offer subscription {subscription_id} is not in status PENDING")
    return create_manual_process_data(process_data, process_step_type, db, f"offer subscription {subscription_id}")


def finalize_process_steps(context: ManualProcessStepData, next_step_types: Optional[Iterable[ProcessStepType]]) -> None:
    if next_step_types:
        context.schedule_process_steps(next_step_types)
    context.finalize_process_step()


def create_subscription_process(db: Session, subscription: models.OfferSubscription) -> models.Process:
    """Attach a new OFFER_SUBSCRIPTION process starting at TRIGGER_PROVIDER."""
    process = process_repo.create_process(db, ProcessType.OFFER_SUBSCRIPTION)
    process_repo.create_process_step(db, ProcessStepType.TRIGGER_PROVIDER, ProcessStepStatus.TODO, process.id)
    subscription.process_id = process.id
    return process
