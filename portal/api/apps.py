"""
Marketplace app endpoints: listings, favourites, subscriptions and app
creation.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.deps import get_current_identity
from portal.db import schemas
from portal.db.database import get_db
from portal.identity import IdentityData
from portal.services.apps_service import AppsService
from portal.services.mailing_service import MailingService, get_mailing_service

router = APIRouter(prefix="/api/apps", tags=["apps"])


def get_apps_service(
    db: Session = Depends(get_db),
    mailing_service: MailingService = Depends(get_mailing_service),
) -> AppsService:
    return AppsService(db, mailing_service)


@router.get("/active", response_model=List[schemas.AppData])
def get_all_active_apps(
    lang: Optional[str] = None,
    service: AppsService = Depends(get_apps_service),
):
    return service.get_all_active_apps(lang)


@router.get("/business", response_model=List[schemas.BusinessAppData])
def get_all_business_apps_for_current_user(
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.get_all_user_business_apps(identity)


@router.get("/favourites", response_model=List[uuid.UUID])
def get_all_favourite_apps_for_current_user(
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.get_all_favourite_apps(identity)


@router.get("/subscribed/subscription-status", response_model=List[schemas.AppSubscriptionStatusData])
def get_company_subscribed_app_subscription_statuses(
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.get_company_subscribed_app_subscription_statuses(identity)


@router.get("/provided/subscription-status", response_model=List[schemas.AppCompanySubscriptionStatusData])
def get_company_provided_app_subscription_statuses(
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.get_company_provided_app_subscription_statuses(identity)


@router.get("/provided", response_model=List[schemas.ProvidedAppData])
def get_app_data_async(
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.get_company_provided_apps(identity)


@router.post("/createapp", status_code=status.HTTP_201_CREATED, response_model=schemas.CreatedResponse)
def create_app(
    app_input: schemas.AppInputModel,
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return schemas.CreatedResponse(id=service.create_app(app_input))


@router.post("/appreleaseprocess/createapp", status_code=status.HTTP_201_CREATED, response_model=schemas.CreatedResponse)
def execute_app_creation(
    app_request: schemas.AppRequestModel,
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return schemas.CreatedResponse(id=service.add_app(app_request))


@router.get("/{app_id}", response_model=schemas.AppDetailsData)
def get_app_details_by_id(
    app_id: uuid.UUID,
    lang: Optional[str] = None,
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.get_app_details(identity, app_id, lang)


@router.post("/{app_id}/favourite", status_code=status.HTTP_204_NO_CONTENT)
def add_favourite_app_for_current_user(
    app_id: uuid.UUID,
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    service.add_favourite_app(identity, app_id)


@router.delete("/{app_id}/favourite", status_code=status.HTTP_204_NO_CONTENT)
def remove_favourite_app_for_current_user(
    app_id: uuid.UUID,
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    service.remove_favourite_app(identity, app_id)


@router.post("/{app_id}/subscribe", status_code=status.HTTP_201_CREATED, response_model=schemas.CreatedResponse)
def add_company_app_subscription(
    app_id: uuid.UUID,
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return schemas.CreatedResponse(id=service.add_own_company_app_subscription(identity, app_id))


@router.put("/{app_id}/subscription/company/{subscribing_company_id}/activate", status_code=status.HTTP_204_NO_CONTENT)
def activate_company_app_subscription(
    app_id: uuid.UUID,
    subscribing_company_id: uuid.UUID,
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    service.activate_own_company_provided_app_subscription(identity, app_id, subscribing_company_id)


@router.put("/{app_id}/unsubscribe", status_code=status.HTTP_204_NO_CONTENT)
def unsubscribe_company_app_subscription(
    app_id: uuid.UUID,
    service: AppsService = Depends(get_apps_service),
    identity: IdentityData = Depends(get_current_identity),
):
    service.unsubscribe_own_company_app_subscription(identity, app_id)
