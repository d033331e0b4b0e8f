"""
Own-company identity provider endpoints.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from portal.api.deps import get_current_identity
from portal.db import schemas
from portal.db.database import get_db
from portal.db.enums import IdentityProviderProtocol
from portal.identity import IdentityData
from portal.services.identity_provider_client import get_identity_provider_client
from portal.services.identity_provider_service import IdentityProviderService

router = APIRouter(prefix="/api/administration/identityprovider", tags=["identity-provider"])


def get_identity_provider_service(db: Session = Depends(get_db)) -> IdentityProviderService:
    return IdentityProviderService(db, get_identity_provider_client())


@router.get("/owncompany/identityproviders", response_model=List[schemas.IdentityProviderDetails], response_model_exclude_none=True)
def get_own_company_identity_providers(
    service: IdentityProviderService = Depends(get_identity_provider_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.get_own_company_identity_providers(identity)


@router.post(
    "/owncompany/identityproviders",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.IdentityProviderDetails,
    response_model_exclude_none=True,
)
def create_own_company_identity_provider(
    protocol: IdentityProviderProtocol,
    service: IdentityProviderService = Depends(get_identity_provider_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.create_own_company_identity_provider(identity, protocol)


@router.put(
    "/owncompany/identityproviders/{identity_provider_id}",
    response_model=schemas.IdentityProviderDetails,
    response_model_exclude_none=True,
)
def update_own_company_identity_provider(
    identity_provider_id: uuid.UUID,
    details: schemas.IdentityProviderEditableDetails,
    service: IdentityProviderService = Depends(get_identity_provider_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.update_own_company_identity_provider(identity, identity_provider_id, details)


@router.get("/owncompany/users", response_model=List[schemas.UserIdentityProviderData])
def get_own_company_users_identity_provider_data(
    aliases: List[str] = Query(default=[], alias="identityProviderAliases"),
    service: IdentityProviderService = Depends(get_identity_provider_service),
    identity: IdentityData = Depends(get_current_identity),
):
    return service.get_own_company_user_identity_provider_data(identity, aliases)
