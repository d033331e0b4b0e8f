"""
Company-owned identity providers.

Rows in ``identity_providers`` track which admin-API alias belongs to which
company; protocol details (OIDC endpoints, SAML entity ids) live in the admin
API and are read through ``IdentityProviderAdminClient``.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from portal import audit
from portal.db import models, schemas
from portal.db.enums import (
    ClientAuthMethod,
    IdentityProviderCategory,
    IdentityProviderProtocol,
    IdentityProviderType,
    SignatureAlgorithm,
)
from portal.db.repositories import companies as company_repo
from portal.db.repositories import identity_providers as idp_repo
from portal.errors import (
    ControllerArgumentException,
    ForbiddenException,
    NotFoundException,
    ServiceException,
)
from portal.identity import IdentityData
from portal.services.identity_provider_client import (
    IdentityProviderAdminClient,
    IdentityProviderAdminError,
    get_identity_provider_client,
)

logger = logging.getLogger(__name__)

PROTOCOL_CATEGORIES = {
    IdentityProviderProtocol.OIDC: IdentityProviderCategory.KEYCLOAK_OIDC,
    IdentityProviderProtocol.SAML: IdentityProviderCategory.KEYCLOAK_SAML,
}

PROVIDER_IDS = {
    IdentityProviderCategory.KEYCLOAK_OIDC: "oidc",
    IdentityProviderCategory.KEYCLOAK_SAML: "saml",
}

CLIENT_AUTH_METHODS = {
    ClientAuthMethod.SECRET_BASIC: "client_secret_basic",
    ClientAuthMethod.SECRET_POST: "client_secret_post",
    ClientAuthMethod.SECRET_JWT: "client_secret_jwt",
    ClientAuthMethod.JWT: "private_key_jwt",
}
CLIENT_AUTH_METHODS_REVERSE = {value: key for key, value in CLIENT_AUTH_METHODS.items()}


def _parse_signature_algorithm(value: Optional[str]) -> Optional[SignatureAlgorithm]:
    if not value:
        return None
    try:
        return SignatureAlgorithm(value)
    except ValueError:
        logger.warning("unknown_signature_algorithm value=%s", value)
        return None


class IdentityProviderService:
    def __init__(self, db: Session, client: Optional[IdentityProviderAdminClient] = None):
        self.db = db
        self.client = client or get_identity_provider_client()

    def get_own_company_identity_providers(self, identity: IdentityData) -> List[schemas.IdentityProviderDetails]:
        return [
            self._get_details(identity_provider)
            for identity_provider in idp_repo.get_company_identity_providers(self.db, identity.company_id)
        ]

    def create_own_company_identity_provider(
        self, identity: IdentityData, protocol: IdentityProviderProtocol
    ) -> schemas.IdentityProviderDetails:
        category = PROTOCOL_CATEGORIES.get(protocol)
        if category is None:
            raise ControllerArgumentException(f"unexpected value of protocol: '{protocol}'", "protocol")
        company = company_repo.get_company(self.db, identity.company_id)
        if company is None:
            raise ControllerArgumentException(f"user {identity.user_id} is not associated with any company", "user_id")

        try:
            alias = self.client.create_identity_provider(PROVIDER_IDS[category], company.name)
        except IdentityProviderAdminError as exc:
            raise ServiceException(f"creating identity provider failed: {exc.message}") from exc

        identity_provider = idp_repo.create_identity_provider(
            self.db, alias, category, IdentityProviderType.OWN, company.id
        )
        idp_repo.create_company_identity_provider(self.db, company.id, identity_provider.id)
        audit.log(
            self.db,
            action=audit.AuditAction.IDENTITY_PROVIDER_CREATE,
            target_id=identity_provider.id,
            identity=identity,
            company_id=company.id,
            metadata={"alias": alias, "protocol": protocol.value},
        )
        self.db.commit()
        logger.info("company_identity_provider_created company_id=%s alias=%s", company.id, alias)
        return self._get_details(identity_provider)

    def update_own_company_identity_provider(
        self,
        identity: IdentityData,
        identity_provider_id: uuid.UUID,
        details: schemas.IdentityProviderEditableDetails,
    ) -> schemas.IdentityProviderDetails:
        identity_provider = idp_repo.get_identity_provider(self.db, identity_provider_id)
        if identity_provider is None:
            raise NotFoundException(f"identityProvider {identity_provider_id} does not exist")
        if not idp_repo.is_assigned_to_company(self.db, identity_provider_id, identity.company_id):
            raise ForbiddenException(
                f"identityProvider {identity_provider_id} is not associated with company {identity.company_id}"
            )

        category = identity_provider.identity_provider_category
        if category == IdentityProviderCategory.KEYCLOAK_OIDC:
            if details.oidc is None:
                raise ControllerArgumentException("property 'oidc' must not be null", "oidc")
            if details.saml is not None:
                raise ControllerArgumentException("property 'saml' must be null", "saml")
        else:
            if details.saml is None:
                raise ControllerArgumentException("property 'saml' must not be null", "saml")
            if details.oidc is not None:
                raise ControllerArgumentException("property 'oidc' must be null", "oidc")

        try:
            representation = self.client.get_identity_provider(identity_provider.alias)
            representation["displayName"] = details.display_name
            config = representation.setdefault("config", {})
            if details.oidc is not None:
                config.update(self._oidc_config(details.oidc))
            else:
                config["entityId"] = details.saml.service_provider_entity_id
                config["singleSignOnServiceUrl"] = details.saml.single_sign_on_service_url
            self.client.update_identity_provider(identity_provider.alias, representation)
        except IdentityProviderAdminError as exc:
            raise ServiceException(f"updating identity provider failed: {exc.message}") from exc

        audit.log(
            self.db,
            action=audit.AuditAction.IDENTITY_PROVIDER_UPDATE,
            target_id=identity_provider.id,
            identity=identity,
            metadata={"alias": identity_provider.alias},
        )
        self.db.commit()
        return self._get_details(identity_provider)

    def get_own_company_user_identity_provider_data(
        self, identity: IdentityData, aliases: Iterable[str]
    ) -> List[schemas.UserIdentityProviderData]:
        aliases = list(dict.fromkeys(aliases))
        if not aliases:
            raise ControllerArgumentException("at least one identityProviderAlias must be specified", "aliases")
        own_aliases = {
            identity_provider.alias
            for identity_provider in idp_repo.get_company_identity_providers(self.db, identity.company_id)
        }
        invalid = [alias for alias in aliases if alias not in own_aliases]
        if invalid:
            raise ControllerArgumentException(
                f"invalid identityProviders: [{', '.join(invalid)}] for company {identity.company_id}", "aliases"
            )
        return [
            schemas.UserIdentityProviderData(
                company_user_id=user.id,
                first_name=user.firstname,
                last_name=user.lastname,
                email=user.email,
                identity_provider_data=[
                    schemas.UserIdentityProviderLinkData(
                        alias=link.alias, user_id=link.provider_user_id, user_name=link.user_name
                    )
                    for link in links
                ],
            )
            for user, links in idp_repo.get_company_user_links(self.db, identity.company_id, aliases)
        ]

    # === Admin API representation mapping ===

    def _oidc_config(self, oidc: schemas.IdentityProviderEditableDetailsOidc) -> Dict[str, Any]:
        discovery = self.client.fetch_openid_configuration(oidc.metadata_url)
        config: Dict[str, Any] = {
            "metadataUrl": oidc.metadata_url,
            "authorizationUrl": discovery.get("authorization_endpoint"),
            "tokenUrl": discovery.get("token_endpoint"),
            "logoutUrl": discovery.get("end_session_endpoint"),
            "jwksUrl": discovery.get("jwks_uri"),
            "clientId": oidc.client_id,
            "clientAuthMethod": CLIENT_AUTH_METHODS[oidc.client_auth_method],
        }
        if oidc.secret is not None:
            config["clientSecret"] = oidc.secret
        if oidc.signature_algorithm is not None:
            config["clientAssertionSigningAlg"] = oidc.signature_algorithm.value
        return config

    def _get_details(self, identity_provider: models.IdentityProvider) -> schemas.IdentityProviderDetails:
        try:
            representation = self.client.get_identity_provider(identity_provider.alias)
            mappers = self.client.get_identity_provider_mappers(identity_provider.alias)
        except IdentityProviderAdminError as exc:
            raise ServiceException(f"reading identity provider {identity_provider.alias} failed: {exc.message}") from exc

        config = representation.get("config") or {}
        details = schemas.IdentityProviderDetails(
            identity_provider_id=identity_provider.id,
            alias=identity_provider.alias,
            identity_provider_category=identity_provider.identity_provider_category,
            identity_provider_type=identity_provider.identity_provider_type,
            display_name=representation.get("displayName"),
            redirect_url=self.client.redirect_url(identity_provider.alias),
            enabled=representation.get("enabled"),
            mappers=[
                schemas.IdentityProviderMapperModel(
                    id=mapper.get("id"),
                    name=mapper.get("name", ""),
                    type=mapper.get("identityProviderMapper", ""),
                    config=mapper.get("config") or {},
                )
                for mapper in mappers
            ],
        )
        if identity_provider.identity_provider_category == IdentityProviderCategory.KEYCLOAK_OIDC:
            details.oidc = schemas.IdentityProviderDetailsOidc(
                metadata_url=config.get("metadataUrl"),
                authorization_url=config.get("authorizationUrl"),
                token_url=config.get("tokenUrl"),
                logout_url=config.get("logoutUrl"),
                client_id=config.get("clientId"),
                has_client_secret=bool(config.get("clientSecret")),
                client_auth_method=CLIENT_AUTH_METHODS_REVERSE.get(config.get("clientAuthMethod")),
                signature_algorithm=_parse_signature_algorithm(config.get("clientAssertionSigningAlg")),
            )
        else:
            details.saml = schemas.IdentityProviderDetailsSaml(
                service_provider_entity_id=config.get("entityId"),
                single_sign_on_service_url=config.get("singleSignOnServiceUrl"),
            )
        return details
