import dataclasses

import pytest

from portal.errors import ControllerArgumentException
from portal.utils.pagination import validate_page
from portal.utils.runtime import dev_mode_active
from portal.utils.settings import get_settings, refresh_settings_cache
from portal.utils.urls import build_portal_link, get_app_base_url, is_https_url


def test_settings_defaults_and_env_override(monkeypatch):
    settings = get_settings()
    assert settings.provider_url_max_length == 100
    assert settings.applications_max_page_size == 20

    monkeypatch.setenv("PROVIDER_URL_MAX_LENGTH", "50")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com,")
    refresh_settings_cache()
    settings = get_settings()
    assert settings.provider_url_max_length == 50
    assert settings.cors_origins == ("https://a.example.com", "https://b.example.com")


def test_settings_ignore_invalid_int(monkeypatch):
    monkeypatch.setenv("APPLICATIONS_MAX_PAGE_SIZE", "many")
    refresh_settings_cache()
    assert get_settings().applications_max_page_size == 20


def test_settings_only_carry_consumed_values():
    names = {f.name for f in dataclasses.fields(get_settings())}
    assert names == {"applications_max_page_size", "provider_url_max_length", "cors_origins"}


@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://example.com", True),
        ("https://example.com/path?x=1", True),
        ("http://example.com", False),
        ("https://", False),
        ("example.com", False),
        (None, False),
        ("", False),
    ],
)
def test_is_https_url(value, expected):
    assert is_https_url(value) is expected


def test_app_base_url(monkeypatch):
    monkeypatch.delenv("APP_HOST", raising=False)
    assert get_app_base_url() == "http://localhost:3000"
    monkeypatch.setenv("APP_HOST", "portal.example.com")
    assert get_app_base_url() == "https://portal.example.com"
    monkeypatch.setenv("APP_BASE_URL", "https://portal.example.org/")
    assert build_portal_link("/apps/1") == "https://portal.example.org/apps/1"


def test_validate_page():
    validate_page(0, 1, 20)
    validate_page(3, 20, 20)
    with pytest.raises(ControllerArgumentException, match="Parameter page must be >= 0"):
        validate_page(-1, 10, 20)
    with pytest.raises(ControllerArgumentException, match="Parameter size must be between 1 and 20"):
        validate_page(0, 21, 20)


def test_dev_mode_guard(monkeypatch):
    assert dev_mode_active() is False
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:3000")
    assert dev_mode_active() is True
    monkeypatch.setenv("APP_BASE_URL", "https://portal.example.com")
    with pytest.raises(RuntimeError):
        dev_mode_active()
    monkeypatch.delenv("APP_BASE_URL")
    with pytest.raises(RuntimeError):
        dev_mode_active()
    monkeypatch.setenv("ALLOW_DEV_MODE", "true")
    assert dev_mode_active() is True
