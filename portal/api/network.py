"""
Partner network registration endpoints.

Submission and OSP decline of company applications registered through an
onboarding service provider.
"""
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.deps import get_current_identity
from portal.db import schemas
from portal.db.database import get_db
from portal.identity import IdentityData
from portal.services.network_service import NetworkService

router = APIRouter(prefix="/api/registration/network", tags=["network"])


@router.post("/partnerRegistration/submit", status_code=status.HTTP_204_NO_CONTENT)
def submit(
    data: schemas.PartnerSubmitData,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    """Submit the caller's company application with its role agreements."""
    NetworkService(db).submit(identity, data)


@router.post("/{application_id}/decline", status_code=status.HTTP_204_NO_CONTENT)
def decline_osp(
    application_id: uuid.UUID,
    data: schemas.DeclineOspData,
    db: Session = Depends(get_db),
    identity: IdentityData = Depends(get_current_identity),
):
    NetworkService(db).decline_osp(identity, application_id, data)
