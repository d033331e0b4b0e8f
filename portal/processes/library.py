"""
Manual process step handling.

A manual step is one triggered by a user request (decline, retrigger, ...)
rather than by a background worker. ``create_manual_process_data`` verifies
that the requested step is eligible to run; the returned context then skips,
schedules and finalizes steps on the same session. Nothing here commits.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from portal.db import models
from portal.db.enums import ProcessStepStatus, ProcessStepType
from portal.db.repositories import processes as process_repo
from portal.db.repositories.processes import VerifyProcessData
from portal.errors import ConflictException, NotFoundException, UnexpectedConditionException

logger = logging.getLogger(__name__)


@dataclass
class ManualProcessStepData:
    process_step_type: ProcessStepType
    process: models.Process
    process_steps: List[models.ProcessStep]
    db: Session

    def request_lock(self, lock_expiry_date: datetime) -> None:
        if not self.process.try_lock(lock_expiry_date):
            raise UnexpectedConditionException(f"process {self.process.id} is already locked")

    def skip_process_steps(self, process_step_types: Iterable[ProcessStepType]) -> None:
        """Skip TODO steps of the given types, leaving the current step alone."""
        types = set(process_step_types)
        for step in self.process_steps:
            if step.process_step_type != self.process_step_type and step.process_step_type in types:
                step.set_status(ProcessStepStatus.SKIPPED)

    def skip_process_steps_except(self, process_step_types: Iterable[ProcessStepType]) -> None:
        """Skip every other TODO step whose type is not listed."""
        keep = set(process_step_types)
        for step in self.process_steps:
            if step.process_step_type != self.process_step_type and step.process_step_type not in keep:
                step.set_status(ProcessStepStatus.SKIPPED)

    def schedule_process_steps(self, process_step_types: Iterable[ProcessStepType]) -> List[models.ProcessStep]:
        """Create TODO steps for types that are not already waiting."""
        waiting = {step.process_step_type for step in self.process_steps}
        to_create = [t for t in dict.fromkeys(process_step_types) if t not in waiting]
        if not to_create:
            return []
        return process_repo.create_process_step_range(
            self.db,
            [(step_type, ProcessStepStatus.TODO, self.process.id) for step_type in to_create],
        )

    def finalize_process_step(self) -> None:
        """Mark the current step DONE and any repeats of it DUPLICATE."""
        current = [step for step in self.process_steps if step.process_step_type == self.process_step_type]
        for index, step in enumerate(current):
            step.set_status(ProcessStepStatus.DONE if index == 0 else ProcessStepStatus.DUPLICATE)
        if not self.process.release_lock():
            self.process.update_version()
        logger.info(
            "process_step_finalized process_id=%s step=%s",
            self.process.id,
            self.process_step_type.value,
        )


def create_manual_process_data(
    process_data: Optional[VerifyProcessData],
    process_step_type: ProcessStepType,
    db: Session,
    entity_name: str,
) -> ManualProcessStepData:
    """Verify ``process_step_type`` may run on the entity's process.

    ``process_data`` is None when the entity itself does not exist.
    """
    if process_data is None:
        raise NotFoundException(f"{entity_name} does not exist")
    process = process_data.process
    if process is None:
        raise ConflictException(f"{entity_name} is not associated with any process")
    if process.is_locked():
        raise ConflictException(
            f"process {process.id} associated with {entity_name} is locked, "
            f"lock expiry is set to {process.lock_expiry_date}"
        )
    steps = list(process_data.process_steps or [])
    if any(step.process_step_status != ProcessStepStatus.TODO for step in steps):
        raise UnexpectedConditionException("processSteps should never have any other status than TODO here")
    if not any(step.process_step_type == process_step_type for step in steps):
        raise ConflictException(f"{entity_name}, process step {process_step_type.value} is not eligible to run")
    return ManualProcessStepData(
        process_step_type=process_step_type,
        process=process,
        process_steps=steps,
        db=db,
    )
