"""
Domain-split Pydantic schemas re-exported from one import path.
"""

from .consents import AgreementConsentData, AgreementData, ConsentData, ConsentDetailData
from .network import PartnerSubmitData, DeclineOspData
from .subscriptions import (
    ProviderDetailData,
    ProviderDetailReturnData,
    ServiceProviderDetailData,
    ServiceProviderDetailReturnData,
    ProcessStepData,
)
from .offers import (
    LocalizedDescription,
    AppData,
    BusinessAppData,
    AppDetailsData,
    AppSubscriptionStatusData,
    CompanySubscriptionStatusData,
    AppCompanySubscriptionStatusData,
    AppInputModel,
    AppRequestModel,
    ProvidedAppData,
    ServiceOverviewData,
    ServiceDescription,
    ServiceOfferingData,
    OfferSubscriptionStateData,
    OfferDetailData,
    SubscriptionDetailData,
    CreatedResponse,
)
from .identity_providers import (
    IdentityProviderMapperModel,
    IdentityProviderDetailsOidc,
    IdentityProviderDetailsSaml,
    IdentityProviderDetails,
    IdentityProviderEditableDetailsOidc,
    IdentityProviderEditableDetailsSaml,
    IdentityProviderEditableDetails,
    UserIdentityProviderLinkData,
    UserIdentityProviderData,
)
from .notifications import NotificationCreate, Notification, NotificationListResponse, NotificationStatsResponse
from .audits import AuditLogCreate

__all__ = [
    # consents
    "AgreementConsentData",
    "AgreementData",
    "ConsentData",
    "ConsentDetailData",
    # network
    "PartnerSubmitData",
    "DeclineOspData",
    # subscriptions / providers
    "ProviderDetailData",
    "ProviderDetailReturnData",
    "ServiceProviderDetailData",
    "ServiceProviderDetailReturnData",
    "ProcessStepData",
    # offers
    "LocalizedDescription",
    "AppData",
    "BusinessAppData",
    "AppDetailsData",
    "AppSubscriptionStatusData",
    "CompanySubscriptionStatusData",
    "AppCompanySubscriptionStatusData",
    "AppInputModel",
    "AppRequestModel",
    "ProvidedAppData",
    "ServiceOverviewData",
    "ServiceDescription",
    "ServiceOfferingData",
    "OfferSubscriptionStateData",
    "OfferDetailData",
    "SubscriptionDetailData",
    "CreatedResponse",
    # identity providers
    "IdentityProviderMapperModel",
    "IdentityProviderDetailsOidc",
    "IdentityProviderDetailsSaml",
    "IdentityProviderDetails",
    "IdentityProviderEditableDetailsOidc",
    "IdentityProviderEditableDetailsSaml",
    "IdentityProviderEditableDetails",
    "UserIdentityProviderLinkData",
    "UserIdentityProviderData",
    # notifications
    "NotificationCreate",
    "Notification",
    "NotificationListResponse",
    "NotificationStatsResponse",
    # audit
    "AuditLogCreate",
]
