import uuid
from sqlalchemy import Column, Text, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from .base import Base, now_utc


class NetworkRegistration(Base):
    """A company registered into the network by an onboarding service provider."""

    __tablename__ = 'network_registrations'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    external_id = Column(Text, nullable=False)
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=False, unique=True)
    onboarding_service_provider_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=False)
    application_id = Column(UUID(as_uuid=True), ForeignKey('company_applications.id'), nullable=False, unique=True)
    process_id = Column(UUID(as_uuid=True), ForeignKey('processes.id'), nullable=True, unique=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)


class OnboardingServiceProviderDetail(Base):
    __tablename__ = 'onboarding_service_provider_details'
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id', ondelete='CASCADE'), primary_key=True)
    callback_url = Column(Text, nullable=False)
    auth_url = Column(Text, nullable=True)
    client_id = Column(Text, nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)
