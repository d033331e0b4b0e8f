import uuid
from sqlalchemy import Column, Text, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from portal.db.enums import IdentityProviderCategory, IdentityProviderType
from .base import Base, now_utc, enum_column


class IdentityProvider(Base):
    __tablename__ = 'identity_providers'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    alias = Column(Text, nullable=False, unique=True)
    identity_provider_category = enum_column(IdentityProviderCategory, nullable=False)
    identity_provider_type = enum_column(IdentityProviderType, nullable=False, default=IdentityProviderType.OWN)
    owner_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=False)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)


class CompanyIdentityProvider(Base):
    __tablename__ = 'company_identity_providers'
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id', ondelete='CASCADE'), primary_key=True)
    identity_provider_id = Column(UUID(as_uuid=True), ForeignKey('identity_providers.id', ondelete='CASCADE'), primary_key=True)


class CompanyUserIdentityProviderLink(Base):
    __tablename__ = 'company_user_identity_provider_links'
    company_user_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id', ondelete='CASCADE'), primary_key=True)
    alias = Column(Text, primary_key=True)
    provider_user_id = Column(Text, nullable=False)
    user_name = Column(Text, nullable=True)
