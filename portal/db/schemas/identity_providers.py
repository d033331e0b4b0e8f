import uuid
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from portal.db.enums import (
    ClientAuthMethod,
    IdentityProviderCategory,
    IdentityProviderType,
    SignatureAlgorithm,
)


class IdentityProviderMapperModel(BaseModel):
    id: Optional[str] = None
    name: str
    type: str
    config: Dict[str, str] = Field(default_factory=dict)


class IdentityProviderDetailsOidc(BaseModel):
    metadata_url: Optional[str] = None
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    logout_url: Optional[str] = None
    client_id: Optional[str] = None
    has_client_secret: bool = False
    client_auth_method: Optional[ClientAuthMethod] = None
    signature_algorithm: Optional[SignatureAlgorithm] = None


class IdentityProviderDetailsSaml(BaseModel):
    service_provider_entity_id: Optional[str] = None
    single_sign_on_service_url: Optional[str] = None


class IdentityProviderDetails(BaseModel):
    """IdP as shown to the owning company; exactly one of oidc/saml is set."""

    identity_provider_id: uuid.UUID
    alias: Optional[str] = None
    identity_provider_category: IdentityProviderCategory
    identity_provider_type: IdentityProviderType
    display_name: Optional[str] = None
    redirect_url: Optional[str] = None
    enabled: Optional[bool] = None
    mappers: Optional[List[IdentityProviderMapperModel]] = None
    oidc: Optional[IdentityProviderDetailsOidc] = None
    saml: Optional[IdentityProviderDetailsSaml] = None


class IdentityProviderEditableDetailsOidc(BaseModel):
    metadata_url: str
    client_auth_method: ClientAuthMethod
    client_id: str
    secret: Optional[str] = None
    signature_algorithm: Optional[SignatureAlgorithm] = None


class IdentityProviderEditableDetailsSaml(BaseModel):
    service_provider_entity_id: str
    single_sign_on_service_url: str


class IdentityProviderEditableDetails(BaseModel):
    display_name: str
    oidc: Optional[IdentityProviderEditableDetailsOidc] = None
    saml: Optional[IdentityProviderEditableDetailsSaml] = None


class UserIdentityProviderLinkData(BaseModel):
    alias: str
    user_id: str
    user_name: Optional[str] = None


class UserIdentityProviderData(BaseModel):
    company_user_id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    identity_provider_data: List[UserIdentityProviderLinkData] = Field(default_factory=list)
