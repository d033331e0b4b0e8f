"""
Process and process step repository functions.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.enums import ProcessStepStatus, ProcessStepType, ProcessType


@dataclass
class VerifyProcessData:
    process: Optional[models.Process]
    process_steps: Optional[List[models.ProcessStep]]


def create_process(db: Session, process_type: ProcessType) -> models.Process:
    process = models.Process(process_type=process_type, version=uuid.uuid4())
    db.add(process)
    db.flush()
    return process


def get_process(db: Session, process_id: uuid.UUID) -> Optional[models.Process]:
    return db.query(models.Process).filter(models.Process.id == process_id).first()


def create_process_step(
    db: Session,
    process_step_type: ProcessStepType,
    process_step_status: ProcessStepStatus,
    process_id: uuid.UUID,
) -> models.ProcessStep:
    step = models.ProcessStep(
        process_step_type=process_step_type,
        process_step_status=process_step_status,
        process_id=process_id,
    )
    db.add(step)
    return step


def create_process_step_range(
    db: Session,
    steps: Iterable[Tuple[ProcessStepType, ProcessStepStatus, uuid.UUID]],
) -> List[models.ProcessStep]:
    """Create several steps, possibly spanning different processes."""
    created = [
        create_process_step(db, step_type, step_status, process_id)
        for step_type, step_status, process_id in steps
    ]
    db.flush()
    return created


def get_process_steps(
    db: Session,
    process_id: uuid.UUID,
    status: Optional[ProcessStepStatus] = None,
) -> List[models.ProcessStep]:
    query = db.query(models.ProcessStep).filter(models.ProcessStep.process_id == process_id)
    if status is not None:
        query = query.filter(models.ProcessStep.process_step_status == status)
    return query.order_by(models.ProcessStep.date_created).all()


def get_process_steps_by_subscription(db: Session, subscription_id: uuid.UUID) -> List[models.ProcessStep]:
    return (
        db.query(models.ProcessStep)
        .join(models.OfferSubscription, models.OfferSubscription.process_id == models.ProcessStep.process_id)
        .filter(models.OfferSubscription.id == subscription_id)
        .order_by(models.ProcessStep.date_created)
        .all()
    )


def get_verify_process_data(db: Session, process_id: Optional[uuid.UUID]) -> VerifyProcessData:
    """Load a process with its TODO steps; missing ids yield empty data."""
    process = get_process(db, process_id) if process_id is not None else None
    if process is None:
        return VerifyProcessData(process=None, process_steps=None)
    return VerifyProcessData(
        process=process,
        process_steps=get_process_steps(db, process.id, ProcessStepStatus.TODO),
    )
