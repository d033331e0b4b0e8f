"""Guards for development-only runtime switches."""

import os
from typing import Optional, Set
from urllib.parse import urlparse

_LOCAL_HOSTS: Set[str] = {"localhost", "127.0.0.1", "::1"}

DEV_USER_EMAIL = "dev@localhost"


def _hostname(url_value: str) -> Optional[str]:
    url_value = (url_value or "").strip()
    if not url_value:
        return None
    candidate = url_value if "://" in url_value else f"http://{url_value}"
    return urlparse(candidate).hostname


def dev_mode_requested() -> bool:
    return os.getenv("DEV_MODE", "false").lower() == "true"


def dev_mode_active() -> bool:
    """Return True when DEV_MODE is on and permitted for this deployment.

    DEV_MODE impersonates ``dev@localhost`` for every request, so it is only
    honoured while APP_BASE_URL points at a local (or DEV_MODE_ALLOWED_HOSTS)
    host, or when ALLOW_DEV_MODE=true is set explicitly. Any other
    combination raises ``RuntimeError``.
    """
    if not dev_mode_requested():
        return False

    allowed = set(_LOCAL_HOSTS)
    allowed.update(h.strip().lower() for h in os.getenv("DEV_MODE_ALLOWED_HOSTS", "").split(",") if h.strip())

    hostname = _hostname(os.getenv("APP_BASE_URL", ""))
    if hostname is None:
        if os.getenv("ALLOW_DEV_MODE", "false").lower() != "true":
            raise RuntimeError("DEV_MODE=true requires a localhost APP_BASE_URL or ALLOW_DEV_MODE=true")
        return True
    if hostname.lower() not in allowed:
        raise RuntimeError(
            f"DEV_MODE=true is not permitted when APP_BASE_URL points to '{hostname}'. "
            f"Allowed hosts: {sorted(allowed)}"
        )
    return True
