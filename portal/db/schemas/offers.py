import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from portal.db.enums import OfferStatus, SubscriptionStatus


class LocalizedDescription(BaseModel):
    language_code: str
    long_description: str = ""
    short_description: str = ""


class AppData(BaseModel):
    id: uuid.UUID
    name: str
    short_description: str
    provider: str
    price: str
    lead_picture_uri: Optional[str] = None
    use_cases: List[str] = Field(default_factory=list)


class BusinessAppData(BaseModel):
    id: uuid.UUID
    name: str
    uri: Optional[str] = None
    lead_picture_uri: Optional[str] = None
    provider: str


class AppDetailsData(BaseModel):
    id: uuid.UUID
    title: str
    lead_picture_uri: Optional[str] = None
    provider: str
    provider_uri: Optional[str] = None
    contact_email: Optional[str] = None
    contact_number: Optional[str] = None
    use_cases: List[str] = Field(default_factory=list)
    long_description: str = ""
    price: str = ""
    languages: List[str] = Field(default_factory=list)
    is_subscribed: Optional[SubscriptionStatus] = None


class AppSubscriptionStatusData(BaseModel):
    app_id: uuid.UUID
    app_name: Optional[str] = None
    provider: str
    offer_subscription_status: SubscriptionStatus


class CompanySubscriptionStatusData(BaseModel):
    company_id: uuid.UUID
    company_name: str
    offer_subscription_status: SubscriptionStatus


class AppCompanySubscriptionStatusData(BaseModel):
    app_id: uuid.UUID
    companies: List[CompanySubscriptionStatusData] = Field(default_factory=list)


class AppInputModel(BaseModel):
    title: str
    provider: str
    lead_picture_uri: Optional[str] = None
    provider_uri: Optional[str] = None
    app_uri: Optional[str] = None
    contact_email: Optional[str] = None
    contact_number: Optional[str] = None
    provider_company_id: Optional[uuid.UUID] = None
    sales_manager_id: Optional[uuid.UUID] = None
    use_case_ids: List[uuid.UUID] = Field(default_factory=list)
    descriptions: List[LocalizedDescription] = Field(default_factory=list)
    supported_language_codes: List[str] = Field(default_factory=list)
    price: str = ""


class AppRequestModel(BaseModel):
    title: str
    provider: str
    lead_picture_uri: Optional[str] = None
    provider_company_id: Optional[uuid.UUID] = None
    use_case_ids: List[uuid.UUID] = Field(default_factory=list)
    descriptions: List[LocalizedDescription] = Field(default_factory=list)
    supported_language_codes: List[str] = Field(default_factory=list)
    price: str = ""


class ProvidedAppData(BaseModel):
    id: uuid.UUID
    name: Optional[str] = None
    lead_picture_uri: Optional[str] = None
    provider: str
    offer_status: OfferStatus
    last_changed: Optional[datetime] = None


class ServiceOverviewData(BaseModel):
    id: uuid.UUID
    title: str
    provider: str
    lead_picture_uri: Optional[str] = None
    contact_email: Optional[str] = None
    description: Optional[str] = None
    price: str


class ServiceDescription(BaseModel):
    language_code: str
    description: str


class ServiceOfferingData(BaseModel):
    title: str
    price: str = ""
    thumbnail_url: Optional[str] = None
    contact_email: Optional[str] = None
    sales_manager: uuid.UUID
    descriptions: List[ServiceDescription] = Field(default_factory=list)


class OfferSubscriptionStateData(BaseModel):
    offer_subscription_id: uuid.UUID
    offer_subscription_status: SubscriptionStatus


class OfferDetailData(BaseModel):
    id: uuid.UUID
    title: str
    provider: str
    lead_picture_uri: Optional[str] = None
    contact_email: Optional[str] = None
    description: Optional[str] = None
    price: str = ""
    offer_subscription_detail_data: List[OfferSubscriptionStateData] = Field(default_factory=list)


class SubscriptionDetailData(BaseModel):
    offer_id: uuid.UUID
    offer_name: str
    offer_subscription_status: SubscriptionStatus


class CreatedResponse(BaseModel):
    id: uuid.UUID
