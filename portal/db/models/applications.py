import uuid
from sqlalchemy import Column, Text, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from portal.db.enums import (
    ApplicationStatus,
    ApplicationType,
    ChecklistEntryStatus,
    ChecklistEntryType,
    InvitationStatus,
)
from .base import Base, now_utc, enum_column


class CompanyApplication(Base):
    __tablename__ = 'company_applications'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=False)
    application_status = enum_column(ApplicationStatus, nullable=False, default=ApplicationStatus.CREATED)
    company_application_type = enum_column(ApplicationType, nullable=False, default=ApplicationType.INTERNAL)
    onboarding_service_provider_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=True)
    checklist_process_id = Column(UUID(as_uuid=True), ForeignKey('processes.id'), nullable=True)
    decline_message = Column(Text, nullable=True)
    last_editor_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id'), nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)

    company = relationship("Company", foreign_keys=[company_id])
    checklist_entries = relationship("ApplicationChecklistEntry", cascade="all, delete-orphan")
    invitations = relationship("Invitation", back_populates="application")

    __table_args__ = (
        Index('ix_company_applications_company_id', 'company_id'),
    )


class ApplicationChecklistEntry(Base):
    __tablename__ = 'application_checklist'
    application_id = Column(UUID(as_uuid=True), ForeignKey('company_applications.id', ondelete='CASCADE'), primary_key=True)
    entry_type = enum_column(ChecklistEntryType, primary_key=True)
    entry_status = enum_column(ChecklistEntryStatus, nullable=False, default=ChecklistEntryStatus.TO_DO)
    comment = Column(Text, nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)


class Invitation(Base):
    __tablename__ = 'invitations'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_application_id = Column(UUID(as_uuid=True), ForeignKey('company_applications.id', ondelete='CASCADE'), nullable=False)
    company_user_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id'), nullable=False)
    invitation_status = enum_column(InvitationStatus, nullable=False, default=InvitationStatus.PENDING)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    application = relationship("CompanyApplication", back_populates="invitations")

    __table_args__ = (
        Index('ix_invitations_company_application_id', 'company_application_id'),
    )
