from typing import List, Optional

from pydantic import BaseModel, Field

from portal.db.enums import CompanyRole
from .consents import AgreementConsentData


class PartnerSubmitData(BaseModel):
    company_roles: List[CompanyRole] = Field(default_factory=list)
    agreements: List[AgreementConsentData] = Field(default_factory=list)


class DeclineOspData(BaseModel):
    message: Optional[str] = None
