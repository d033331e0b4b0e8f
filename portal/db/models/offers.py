import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from portal.db.enums import OfferStatus, OfferType, SubscriptionStatus
from .base import Base, now_utc, enum_column


class Offer(Base):
    """An app or service listed in the marketplace."""

    __tablename__ = 'offers'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    offer_type = enum_column(OfferType, nullable=False)
    name = Column(Text, nullable=True)
    provider = Column(Text, nullable=False)
    provider_company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=True)
    sales_manager_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id'), nullable=True)
    offer_status = enum_column(OfferStatus, nullable=False, default=OfferStatus.CREATED)
    thumbnail_url = Column(Text, nullable=True)
    marketing_url = Column(Text, nullable=True)
    app_url = Column(Text, nullable=True)
    contact_email = Column(Text, nullable=True)
    contact_number = Column(Text, nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_released = Column(DateTime(timezone=True), nullable=True)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)

    provider_company = relationship("Company")
    descriptions = relationship("OfferDescription", cascade="all, delete-orphan")
    languages = relationship("OfferAssignedLanguage", cascade="all, delete-orphan")
    use_cases = relationship("OfferAssignedUseCase", cascade="all, delete-orphan")
    subscriptions = relationship("OfferSubscription", back_populates="offer")

    __table_args__ = (
        Index('ix_offers_offer_type_status', 'offer_type', 'offer_status'),
    )


class Language(Base):
    __tablename__ = 'languages'
    short_name = Column(String(2), primary_key=True)
    long_name = Column(Text, nullable=True)


class OfferDescription(Base):
    __tablename__ = 'offer_descriptions'
    offer_id = Column(UUID(as_uuid=True), ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True)
    language_short_name = Column(String(2), ForeignKey('languages.short_name'), primary_key=True)
    description_long = Column(Text, nullable=False, default="")
    description_short = Column(Text, nullable=False, default="")


class OfferAssignedLanguage(Base):
    __tablename__ = 'offer_assigned_languages'
    offer_id = Column(UUID(as_uuid=True), ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True)
    language_short_name = Column(String(2), ForeignKey('languages.short_name'), primary_key=True)


class UseCase(Base):
    __tablename__ = 'use_cases'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    shortname = Column(Text, nullable=False)


class OfferAssignedUseCase(Base):
    __tablename__ = 'offer_assigned_use_cases'
    offer_id = Column(UUID(as_uuid=True), ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True)
    use_case_id = Column(UUID(as_uuid=True), ForeignKey('use_cases.id'), primary_key=True)


class OfferLicense(Base):
    __tablename__ = 'offer_licenses'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    licensetext = Column(Text, nullable=False)


class OfferAssignedLicense(Base):
    __tablename__ = 'offer_assigned_licenses'
    offer_id = Column(UUID(as_uuid=True), ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True)
    offer_license_id = Column(UUID(as_uuid=True), ForeignKey('offer_licenses.id'), primary_key=True)


class OfferSubscription(Base):
    __tablename__ = 'offer_subscriptions'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    offer_id = Column(UUID(as_uuid=True), ForeignKey('offers.id'), nullable=False)
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=False)
    offer_subscription_status = enum_column(SubscriptionStatus, nullable=False, default=SubscriptionStatus.PENDING)
    requester_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id'), nullable=False)
    last_editor_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id'), nullable=True)
    process_id = Column(UUID(as_uuid=True), ForeignKey('processes.id'), nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)

    offer = relationship("Offer", back_populates="subscriptions")
    company = relationship("Company")

    __table_args__ = (
        Index('ix_offer_subscriptions_offer_id_company_id', 'offer_id', 'company_id'),
    )


class CompanyUserAssignedAppFavourite(Base):
    __tablename__ = 'company_user_assigned_app_favourites'
    company_user_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id', ondelete='CASCADE'), primary_key=True)
    app_id = Column(UUID(as_uuid=True), ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True)
