import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SiteSettings(BaseSettings):
    """Deployment specific literals and connection settings, read from SITE_* variables"""

    site_name: str = "EuregJUG"
    base_url: str = "http://euregjug.eu"
    domain: str = "euregjug.eu"

    # Calendar export
    organizer: str = "EuregJUG"
    calendar_prodid: str = "http://www.euregjug.eu/events"
    ics_datetime_format: str = "%Y%m%dT%H%M%SZ"

    # News feed
    feed_title: str = "EuregJUG Maas-Rhine - All things JVM!"
    feed_description: str = (
        "RSS Feed from EuregJUG, the Java User Group for the Euregio "
        "Maas-Rhine (Aachen, Maastricht, Liege)."
    )
    feed_generator: str = "https://github.com/EuregJUG-Maas-Rhine/site"
    feed_author: str = "euregjug.eu"
    page_size: int = Field(default=5, gt=0)

    # Storage
    table_name: str = "CommunityApp"
    dynamodb_endpoint_url: Optional[str] = Field(
        default=None, description="Local DynamoDB endpoint, AWS when unset"
    )
    aws_region: str = "us-east-1"

    default_locale: str = "en"
    supported_locales: str = Field(
        default="en,de", description="Supported locales (comma-separated)"
    )

    recaptcha_enabled: bool = False
    recaptcha_secret: Optional[str] = None
    recaptcha_verify_url: str = "https://www.google.com/recaptcha/api/siteverify"
    recaptcha_timeout: float = 5.0

    smtp_host: Optional[str] = None
    smtp_port: int = 25
    mail_from: str = "info@euregjug.eu"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    session_secret: str = "change-me"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SITE_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    def get_supported_locales_list(self) -> List[str]:
        """Parse supported locales from comma-separated string."""
        return [locale.strip() for locale in self.supported_locales.split(",") if locale.strip()]


@lru_cache()
def get_settings() -> SiteSettings:
    return SiteSettings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
