"""
Identity provider admin client.

Thin wrapper over the Keycloak admin REST API used to manage the identity
providers a company brings into the central realm. Authenticates with a
service account (client credentials) and refreshes its token before expiry.
"""
from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5
TOKEN_LIFETIME_SECONDS = 60


class IdentityProviderAdminError(Exception):
    """HTTP or transport failure talking to the admin API."""

    def __init__(self, status_code: int, message: str, url: str = ""):
        super().__init__(f"{status_code} {url}: {message}")
        self.status_code = status_code
        self.message = message
        self.url = url


class IdentityProviderClientConfig:
    def __init__(self):
        self.base_url = os.getenv('KEYCLOAK_BASE_URL', 'http://keycloak:8080').rstrip('/')
        self.realm = os.getenv('KEYCLOAK_REALM', 'portal')
        self.client_id = os.getenv('KEYCLOAK_CLIENT_ID', 'portal-admin')
        self.client_secret = os.getenv('KEYCLOAK_CLIENT_SECRET', '')


class IdentityProviderAdminClient:
    """Service-account client for identity provider instances of one realm.

    Usage:
        client = IdentityProviderAdminClient()
        alias = client.create_identity_provider("oidc", "Acme")
        representation = client.get_identity_provider(alias)
    """

    def __init__(self, config: Optional[IdentityProviderClientConfig] = None):
        self.config = config or IdentityProviderClientConfig()
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None

    @property
    def _instances_path(self) -> str:
        return f"/admin/realms/{self.config.realm}/identity-provider/instances"

    def redirect_url(self, alias: str) -> str:
        return f"{self.config.base_url}/realms/{self.config.realm}/broker/{alias}/endpoint"

    # === Identity provider operations ===

    def create_identity_provider(self, provider_id: str, display_name: Optional[str]) -> str:
        """Create a disabled identity provider and return its generated alias."""
        alias = f"idp-{uuid.uuid4().hex[:12]}"
        payload = {
            "alias": alias,
            "displayName": display_name,
            "providerId": provider_id,
            "enabled": False,
            "config": {},
        }
        self._request("POST", self._instances_path, json=payload)
        logger.info("identity_provider_created alias=%s provider=%s", alias, provider_id)
        return alias

    def get_identity_provider(self, alias: str) -> Dict[str, Any]:
        return self._request("GET", f"{self._instances_path}/{alias}").json()

    def update_identity_provider(self, alias: str, representation: Dict[str, Any]) -> None:
        self._request("PUT", f"{self._instances_path}/{alias}", json=representation)
        logger.info("identity_provider_updated alias=%s", alias)

    def get_identity_provider_mappers(self, alias: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"{self._instances_path}/{alias}/mappers").json()

    def fetch_openid_configuration(self, metadata_url: str) -> Dict[str, Any]:
        """Load an OIDC discovery document (``.well-known/openid-configuration``)."""
        try:
            resp = requests.get(metadata_url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise IdentityProviderAdminError(503, str(exc), metadata_url) from exc
        self._handle_error(resp)
        return resp.json()

    # === HTTP plumbing ===

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        self._ensure_authenticated()
        url = f"{self.config.base_url}{path}"
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._token}"
        try:
            resp = requests.request(method, url, headers=headers, timeout=REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as exc:
            raise IdentityProviderAdminError(503, str(exc), url) from exc
        self._handle_error(resp)
        return resp

    def _ensure_authenticated(self) -> None:
        # Refresh if the token is missing or expires within 10 seconds
        if self._token and self._token_expires_at and datetime.now() < self._token_expires_at - timedelta(seconds=10):
            return
        self._token = self._get_service_account_token()
        self._token_expires_at = datetime.now() + timedelta(seconds=TOKEN_LIFETIME_SECONDS)

    def _get_service_account_token(self) -> str:
        url = f"{self.config.base_url}/realms/{self.config.realm}/protocol/openid-connect/token"
        data = {
            "grant_type": "client_credentials",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
        }
        try:
            resp = requests.post(url, data=data, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise IdentityProviderAdminError(503, str(exc), url) from exc
        if resp.status_code != 200:
            raise IdentityProviderAdminError(resp.status_code, resp.text, url)
        return resp.json()["access_token"]

    @staticmethod
    def _handle_error(resp: requests.Response) -> None:
        if resp.status_code >= 400:
            raise IdentityProviderAdminError(resp.status_code, resp.text, resp.url)


_identity_provider_client = None


def get_identity_provider_client() -> IdentityProviderAdminClient:
    """Get singleton admin client instance."""
    global _identity_provider_client
    if _identity_provider_client is None:
        _identity_provider_client = IdentityProviderAdminClient()
    return _identity_provider_client
