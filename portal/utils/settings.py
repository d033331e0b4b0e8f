"""Portal settings sourced from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple


def _normalize_list(value: str | None, default: Tuple[str, ...] = ()) -> Tuple[str, ...]:
    """Return a tuple of stripped, non-empty entries from a comma separated value."""
    if value is None:
        return default
    entries = tuple(part.strip() for part in value.split(",") if part.strip())
    return entries or default


def _normalize_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class PortalSettings:
    applications_max_page_size: int = 20
    provider_url_max_length: int = 100
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("http://localhost", "http://localhost:3000"))


@lru_cache(maxsize=None)
def get_settings() -> PortalSettings:
    """Return the cached settings built from the environment."""
    defaults = PortalSettings()
    return PortalSettings(
        applications_max_page_size=_normalize_int(os.getenv("APPLICATIONS_MAX_PAGE_SIZE"), defaults.applications_max_page_size),
        provider_url_max_length=_normalize_int(os.getenv("PROVIDER_URL_MAX_LENGTH"), defaults.provider_url_max_length),
        cors_origins=_normalize_list(os.getenv("CORS_ORIGINS"), defaults.cors_origins),
    )


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
