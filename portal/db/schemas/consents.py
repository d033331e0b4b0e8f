import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict

from portal.db.enums import ConsentStatus


class AgreementConsentData(BaseModel):
    agreement_id: uuid.UUID
    consent_status: ConsentStatus


class ConsentDetailData(BaseModel):
    id: uuid.UUID
    company_name: str
    company_user_id: uuid.UUID
    consent_status: ConsentStatus
    agreement_name: str


class AgreementData(BaseModel):
    agreement_id: uuid.UUID
    name: str
    agreement_link: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class ConsentData(BaseModel):
    id: uuid.UUID
    agreement_id: uuid.UUID
    company_id: uuid.UUID
    company_user_id: uuid.UUID
    consent_status: ConsentStatus
    model_config = ConfigDict(from_attributes=True)
