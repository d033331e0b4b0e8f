"""
Provider auto-setup configuration and offer subscription process endpoints.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.deps import get_current_identity
from portal.db import schemas
from portal.db.database import get_db
from portal.identity import IdentityData
from portal.services.subscription_configuration_service import SubscriptionConfigurationService

router = APIRouter(prefix="/api/administration/subscriptionconfiguration", tags=["subscription-configuration"])


@router.get("/owncompany", response_model=schemas.ProviderDetailReturnData)
def get_service_provider_company_detail(
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return SubscriptionConfigurationService(db).get_provider_company_details(identity.company_id)


@router.put("/owncompany", status_code=status.HTTP_204_NO_CONTENT)
def set_provider_company_detail(
    data: schemas.ProviderDetailData,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    SubscriptionConfigurationService(db).set_provider_company_details(identity, data)


@router.post("/process/offer-subscription/{subscription_id}/retrigger-provider", status_code=status.HTTP_204_NO_CONTENT)
def retrigger_provider(
    subscription_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    SubscriptionConfigurationService(db).retrigger_provider(subscription_id)


@router.post("/process/offer-subscription/{subscription_id}/retrigger-create-client", status_code=status.HTTP_204_NO_CONTENT)
def retrigger_create_client(
    subscription_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    SubscriptionConfigurationService(db).retrigger_create_client(subscription_id)


@router.post(
    "/process/offer-subscription/{subscription_id}/retrigger-create-technical-user",
    status_code=status.HTTP_204_NO_CONTENT,
)
def retrigger_create_technical_user(
    subscription_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    SubscriptionConfigurationService(db).retrigger_create_technical_user(subscription_id)


@router.post(
    "/process/offer-subscription/{subscription_id}/retrigger-provider-callback",
    status_code=status.HTTP_204_NO_CONTENT,
)
def retrigger_provider_callback(
    subscription_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    SubscriptionConfigurationService(db).retrigger_provider_callback(subscription_id)


@router.get("/process/offer-subscription/{subscription_id}", response_model=List[schemas.ProcessStepData])
def get_process_steps_for_subscription(
    subscription_id: uuid.UUID,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    return SubscriptionConfigurationService(db).get_process_steps_for_subscription(subscription_id)
