import uuid
from sqlalchemy import Column, Text, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID

from portal.db.enums import AgreementStatus, CompanyRole, ConsentStatus
from .base import Base, now_utc, enum_column


class Agreement(Base):
    __tablename__ = 'agreements'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    agreement_status = enum_column(AgreementStatus, nullable=False, default=AgreementStatus.ACTIVE)
    agreement_link = Column(Text, nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)


class AgreementAssignedCompanyRole(Base):
    __tablename__ = 'agreement_assigned_company_roles'
    agreement_id = Column(UUID(as_uuid=True), ForeignKey('agreements.id', ondelete='CASCADE'), primary_key=True)
    company_role = enum_column(CompanyRole, primary_key=True)


class AgreementAssignedOffer(Base):
    __tablename__ = 'agreement_assigned_offers'
    agreement_id = Column(UUID(as_uuid=True), ForeignKey('agreements.id', ondelete='CASCADE'), primary_key=True)
    offer_id = Column(UUID(as_uuid=True), ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True)


class Consent(Base):
    __tablename__ = 'consents'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    agreement_id = Column(UUID(as_uuid=True), ForeignKey('agreements.id'), nullable=False)
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=False)
    company_user_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id'), nullable=False)
    consent_status = enum_column(ConsentStatus, nullable=False)
    comment = Column(Text, nullable=True)
    target = Column(Text, nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('ix_consents_company_id_agreement_id', 'company_id', 'agreement_id'),
    )


class ConsentAssignedOffer(Base):
    __tablename__ = 'consent_assigned_offers'
    consent_id = Column(UUID(as_uuid=True), ForeignKey('consents.id', ondelete='CASCADE'), primary_key=True)
    offer_id = Column(UUID(as_uuid=True), ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True)


class ConsentAssignedOfferSubscription(Base):
    __tablename__ = 'consent_assigned_offer_subscriptions'
    consent_id = Column(UUID(as_uuid=True), ForeignKey('consents.id', ondelete='CASCADE'), primary_key=True)
    offer_subscription_id = Column(UUID(as_uuid=True), ForeignKey('offer_subscriptions.id', ondelete='CASCADE'), primary_key=True)
