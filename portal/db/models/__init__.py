"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc` and every ORM class from one import path.
"""

from .base import Base, now_utc, enum_column  # re-export

from .companies import Company, CompanyAssignedRole, CompanyUser, CompanyUserAssignedRole, ProviderCompanyDetail
from .processes import Process, ProcessStep
from .applications import CompanyApplication, ApplicationChecklistEntry, Invitation
from .network import NetworkRegistration, OnboardingServiceProviderDetail
from .agreements import (
    Agreement,
    AgreementAssignedCompanyRole,
    AgreementAssignedOffer,
    Consent,
    ConsentAssignedOffer,
    ConsentAssignedOfferSubscription,
)
from .offers import (
    Offer,
    Language,
    OfferDescription,
    OfferAssignedLanguage,
    UseCase,
    OfferAssignedUseCase,
    OfferLicense,
    OfferAssignedLicense,
    OfferSubscription,
    CompanyUserAssignedAppFavourite,
)
from .notifications import Notification
from .identity_providers import IdentityProvider, CompanyIdentityProvider, CompanyUserIdentityProviderLink
from .audit import AuditLog

__all__ = [
    # base
    "Base",
    "now_utc",
    "enum_column",
    # companies/users
    "Company",
    "CompanyAssignedRole",
    "CompanyUser",
    "CompanyUserAssignedRole",
    "ProviderCompanyDetail",
    # processes
    "Process",
    "ProcessStep",
    # registration
    "CompanyApplication",
    "ApplicationChecklistEntry",
    "Invitation",
    "NetworkRegistration",
    "OnboardingServiceProviderDetail",
    # agreements/consents
    "Agreement",
    "AgreementAssignedCompanyRole",
    "AgreementAssignedOffer",
    "Consent",
    "ConsentAssignedOffer",
    "ConsentAssignedOfferSubscription",
    # marketplace
    "Offer",
    "Language",
    "OfferDescription",
    "OfferAssignedLanguage",
    "UseCase",
    "OfferAssignedUseCase",
    "OfferLicense",
    "OfferAssignedLicense",
    "OfferSubscription",
    "CompanyUserAssignedAppFavourite",
    # notifications/idp/audit
    "Notification",
    "IdentityProvider",
    "CompanyIdentityProvider",
    "CompanyUserIdentityProviderLink",
    "AuditLog",
]
