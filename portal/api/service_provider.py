"""
Service provider company detail endpoints.
"""
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.deps import get_current_identity
from portal.db import schemas
from portal.db.database import get_db
from portal.identity import IdentityData
from portal.services.service_provider_service import ServiceProviderService

router = APIRouter(prefix="/api/administration/serviceprovider", tags=["service-provider"])


@router.get("/owncompany/{service_provider_detail_data_id}", response_model=schemas.ServiceProviderDetailReturnData)
def get_service_provider_company_detail(
    service_provider_detail_data_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return ServiceProviderService(db).get_service_provider_company_details(identity, service_provider_detail_data_id)


@router.post("/owncompany", status_code=status.HTTP_201_CREATED, response_model=schemas.CreatedResponse)
def create_service_provider_company_detail(
    data: schemas.ServiceProviderDetailData,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    detail_id = ServiceProviderService(db).create_service_provider_company_details(identity, data)
    return schemas.CreatedResponse(id=detail_id)
