import pytest
from pydantic import ValidationError

from jugsite.config import SiteSettings


def test_defaults_are_the_reference_deployment():
    settings = SiteSettings()

    assert settings.organizer == "EuregJUG"
    assert settings.domain == "euregjug.eu"
    assert settings.page_size == 5
    assert settings.dynamodb_endpoint_url is None
    assert settings.get_supported_locales_list() == ["en", "de"]


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SITE_PAGE_SIZE", "10")
    monkeypatch.setenv("SITE_RECAPTCHA_ENABLED", "true")
    monkeypatch.setenv("SITE_SUPPORTED_LOCALES", "en, nl")
    monkeypatch.setenv("SITE_ORGANIZER", "ACME")
    monkeypatch.setenv("SITE_DYNAMODB_ENDPOINT_URL", "http://localhost:8000")

    settings = SiteSettings()

    assert settings.page_size == 10
    assert settings.recaptcha_enabled is True
    assert settings.get_supported_locales_list() == ["en", "nl"]
    assert settings.organizer == "ACME"
    assert settings.dynamodb_endpoint_url == "http://localhost:8000"
    assert settings.domain == "euregjug.eu"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("SITE_LOG_LEVEL", "chatty")

    with pytest.raises(ValidationError):
        SiteSettings()
