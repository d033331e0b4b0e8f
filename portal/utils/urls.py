"""
URL helpers: provider URL validation and absolute links for notifications.

APP_BASE_URL (e.g. https://portal.example.org) is the base for links placed
in mails; APP_HOST is accepted as a legacy fallback.
"""
from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlparse


def _strip_trailing_slash(url: str) -> str:
    return url[:-1] if url.endswith("/") else url


def get_app_base_url() -> str:
    """Return the normalized frontend base URL, defaulting to localhost."""
    base = os.getenv("APP_BASE_URL")
    if base and base.strip():
        return _strip_trailing_slash(base.strip())
    host = (os.getenv("APP_HOST") or "").strip()
    if host:
        if host.startswith(("http://", "https://")):
            return _strip_trailing_slash(host)
        scheme = "http" if host.lower().startswith(("localhost", "127.0.0.1")) else "https"
        return _strip_trailing_slash(f"{scheme}://{host}")
    return "http://localhost:3000"


def is_https_url(value: Optional[str]) -> bool:
    """Return True for an absolute https URL with a host."""
    if not value:
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme == "https" and bool(parsed.netloc)


def build_portal_link(path: str) -> str:
    return f"{get_app_base_url()}/{path.lstrip('/')}"
