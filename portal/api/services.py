"""
Marketplace service endpoints: listings, offerings, subscriptions and
agreement consents.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.deps import get_current_identity
from portal.db import schemas
from portal.db.database import get_db
from portal.identity import IdentityData
from portal.services.services_service import ServicesService
from portal.utils.pagination import Pagination

router = APIRouter(prefix="/api/services", tags=["services"])


@router.get("/active", response_model=Pagination[schemas.ServiceOverviewData])
def get_all_active_services(
    page: int = 0,
    size: int = 15,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return ServicesService(db).get_all_active_services(page, size)


@router.post("/addservice", status_code=status.HTTP_201_CREATED, response_model=schemas.CreatedResponse)
def create_service_offering(
    data: schemas.ServiceOfferingData,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return schemas.CreatedResponse(id=ServicesService(db).create_service_offering(identity, data))


@router.get("/subscription/{subscription_id}", response_model=schemas.SubscriptionDetailData)
def get_subscription_detail(
    subscription_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return ServicesService(db).get_subscription_detail(identity, subscription_id)


@router.get("/serviceAgreementData/{service_id}", response_model=List[schemas.AgreementData])
def get_service_agreement(
    service_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return ServicesService(db).get_service_agreements(service_id)


@router.get("/serviceConsent/{service_consent_id}", response_model=schemas.ConsentDetailData)
def get_service_agreement_consent_detail(
    service_consent_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return ServicesService(db).get_service_consent_detail(service_consent_id)


@router.get("/{service_id}", response_model=schemas.OfferDetailData)
def get_service_details(
    service_id: uuid.UUID,
    lang: Optional[str] = None,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return ServicesService(db).get_service_details(identity, service_id, lang)


@router.post("/{service_id}/subscribe", status_code=status.HTTP_201_CREATED, response_model=schemas.CreatedResponse)
def add_service_subscription(
    service_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return schemas.CreatedResponse(id=ServicesService(db).add_service_subscription(identity, service_id))


@router.post(
    "/{subscription_id}/serviceAgreementConsent",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.CreatedResponse,
)
def create_service_agreement_consent(
    subscription_id: uuid.UUID,
    data: schemas.AgreementConsentData,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    consent_id = ServicesService(db).create_service_agreement_consent(identity, subscription_id, data)
    return schemas.CreatedResponse(id=consent_id)


@router.put("/{subscription_id}/serviceAgreementConsents", status_code=status.HTTP_204_NO_CONTENT)
def create_or_update_service_agreement_consents(
    subscription_id: uuid.UUID,
    data: List[schemas.AgreementConsentData],
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    ServicesService(db).create_or_update_service_agreement_consents(identity, subscription_id, data)
