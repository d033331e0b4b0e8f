import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from portal.db.enums import ProcessStepStatus, ProcessStepType


class ProviderDetailData(BaseModel):
    url: str
    callback_url: Optional[str] = None


class ProviderDetailReturnData(BaseModel):
    # id and url stay empty until the provider stores its details
    id: Optional[uuid.UUID] = None
    company_id: uuid.UUID
    url: Optional[str] = None
    callback_url: Optional[str] = None


class ServiceProviderDetailData(BaseModel):
    url: str


class ServiceProviderDetailReturnData(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    url: str


class ProcessStepData(BaseModel):
    process_step_type: ProcessStepType
    process_step_status: ProcessStepStatus
    message: Optional[str] = None
    date_created: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
