"""
Service provider company details.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from portal import audit
from portal.db import schemas
from portal.db.enums import CompanyRole
from portal.db.repositories import companies as company_repo
from portal.errors import ConflictException, ControllerArgumentException, ForbiddenException, NotFoundException
from portal.identity import IdentityData
from portal.utils.settings import get_settings

logger = logging.getLogger(__name__)


class ServiceProviderService:
    def __init__(self, db: Session):
        self.db = db

    def get_service_provider_company_details(
        self, identity: IdentityData, detail_id: uuid.UUID
    ) -> schemas.ServiceProviderDetailReturnData:
        detail = company_repo.get_provider_company_detail_by_id(self.db, detail_id)
        if detail is None:
            raise NotFoundException(f"serviceProviderDetail {detail_id} does not exist")
        if detail.company_id != identity.company_id:
            raise ForbiddenException(
                f"User {identity.user_id} is not allowed to request the service provider detail data."
            )
        if not company_repo.company_has_any_role(self.db, detail.company_id, [CompanyRole.SERVICE_PROVIDER]):
            raise ForbiddenException(f"users {identity.user_id} company is not a service-provider")
        return schemas.ServiceProviderDetailReturnData(
            id=detail.id,
            company_id=detail.company_id,
            url=detail.auto_setup_url,
        )

    def create_service_provider_company_details(
        self, identity: IdentityData, data: schemas.ServiceProviderDetailData
    ) -> uuid.UUID:
        max_length = get_settings().provider_url_max_length
        url = data.url
        if not url or not url.strip() or not url.startswith("https://") or len(url) > max_length:
            raise ControllerArgumentException(
                f"Url must start with https and the maximum allowed length is {max_length} characters", "url"
            )
        if company_repo.get_company(self.db, identity.company_id) is None:
            raise ConflictException(f"User {identity.user_id} is not assigned to company")
        if not company_repo.company_has_any_role(self.db, identity.company_id, [CompanyRole.SERVICE_PROVIDER]):
            raise ForbiddenException(f"users {identity.user_id} company is not a service-provider")
        if company_repo.get_provider_company_detail(self.db, identity.company_id) is not None:
            raise ConflictException(f"Company {identity.company_id} already has provider details")

        detail = company_repo.create_provider_company_detail(
            self.db, identity.company_id, url, last_editor_id=identity.user_id
        )
        audit.log(
            self.db,
            action=audit.AuditAction.SERVICE_PROVIDER_DETAILS_CREATE,
            target_id=detail.id,
            identity=identity,
        )
        self.db.commit()
        logger.info("service_provider_details_created company_id=%s detail_id=%s", identity.company_id, detail.id)
        return detail.id
