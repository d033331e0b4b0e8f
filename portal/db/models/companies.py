import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from portal.db.enums import CompanyRole, CompanyStatus, UserStatus
from .base import Base, now_utc, enum_column


class Company(Base):
    __tablename__ = 'companies'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    shortname = Column(Text, nullable=True, unique=True)
    business_partner_number = Column(String(20), nullable=True, unique=True)
    company_status = enum_column(CompanyStatus, nullable=False, default=CompanyStatus.PENDING)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)

    assigned_roles = relationship("CompanyAssignedRole", back_populates="company", cascade="all, delete-orphan")
    users = relationship("CompanyUser", back_populates="company")


class CompanyAssignedRole(Base):
    __tablename__ = 'company_assigned_roles'
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id', ondelete='CASCADE'), primary_key=True)
    company_role = enum_column(CompanyRole, primary_key=True)

    company = relationship("Company", back_populates="assigned_roles")


class CompanyUser(Base):
    __tablename__ = 'company_users'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id'), nullable=False)
    email = Column(Text, nullable=False, unique=True)
    firstname = Column(Text, nullable=True)
    lastname = Column(Text, nullable=True)
    user_status = enum_column(UserStatus, nullable=False, default=UserStatus.ACTIVE)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)

    company = relationship("Company", back_populates="users")
    assigned_roles = relationship("CompanyUserAssignedRole", cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_company_users_company_id', 'company_id'),
    )

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.firstname, self.lastname) if part)
        return full or self.email


class CompanyUserAssignedRole(Base):
    __tablename__ = 'company_user_assigned_roles'
    company_user_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id', ondelete='CASCADE'), primary_key=True)
    user_role = Column(Text, primary_key=True)


class ProviderCompanyDetail(Base):
    __tablename__ = 'provider_company_details'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, unique=True)
    auto_setup_url = Column(String(100), nullable=False)
    auto_setup_callback_url = Column(String(100), nullable=True)
    date_created = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    date_last_changed = Column(DateTime(timezone=True), nullable=True)
    last_editor_id = Column(UUID(as_uuid=True), ForeignKey('company_users.id'), nullable=True)
