import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Text, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from portal.db.enums import ProcessStepStatus, ProcessStepType, ProcessType
from .base import Base, now_utc, enum_column


class Process(Base):
    """Workflow unit; ``version`` is the optimistic concurrency token.

    The token is managed by the application: every state change of the
    process assigns a fresh value through :meth:`update_version`, and the
    UPDATE is guarded by the previously loaded value so a concurrent writer
    fails with ``StaleDataError``.
    """

    __tablename__ = 'processes'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    process_type = enum_column(ProcessType, nullable=False)
    lock_expiry_date = Column(DateTime(timezone=True), nullable=True)
    version = Column(UUID(as_uuid=True), nullable=False, default=uuid.uuid4)

    process_steps = relationship("ProcessStep", back_populates="process", order_by="ProcessStep.date_created")

    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": False,
    }

    def update_version(self) -> uuid.UUID:
        self.version = uuid.uuid4()
        return self.version

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        if self.lock_expiry_date is None:
            return False
        expiry = self.lock_expiry_date
        current = now or now_utc()
        if expiry.tzinfo is None:
            # SQLite returns naive datetimes
            current = current.replace(tzinfo=None)
        return expiry > current

    def try_lock(self, lock_expiry_date: datetime) -> bool:
        if self.is_locked():
            return False
        self.lock_expiry_date = lock_expiry_date
        self.update_version()
        return True

    def release_lock(self) -> bool:
        if self.lock_expiry_date is None:
            return False
        self.lock_expiry_date = None
        self.update_version()
        return True


class ProcessStep(Base):
    __tablename__ = 'process_steps'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    process_step_type = enum_column(ProcessStepType, nullable=False)
    process_step_status = enum_column(ProcessStepStatus, nullable=False, default=ProcessStepStatus.TODO)
    process_id = Column(UUID(as_uuid=True), ForeignKey('processes.id', ondelete='CASCADE'), nullable=False)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)
    message = Column(Text, nullable=True)

    process = relationship("Process", back_populates="process_steps")

    __table_args__ = (
        Index('ix_process_steps_process_id_status', 'process_id', 'process_step_status'),
    )

    def set_status(self, status: ProcessStepStatus, message: Optional[str] = None) -> None:
        """Move a TODO step to a terminal status; terminal steps never move again."""
        if self.process_step_status != ProcessStepStatus.TODO:
            raise ValueError(
                f"process step {self.id} is {self.process_step_status.value}, cannot change to {status.value}"
            )
        self.process_step_status = status
        self.date_last_changed = now_utc()
        if message is not None:
            self.message = message
