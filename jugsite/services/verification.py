import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from jugsite.config import SiteSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationContext:
    """What the verification gate needs from the inbound request"""

    response_token: Optional[str]
    remote_ip: Optional[str] = None


class RecaptchaVerifier:
    """Checks a reCAPTCHA response token against the verification endpoint.

    When disabled every request passes. Transport errors count as failed
    verification.
    """

    def __init__(self, settings: SiteSettings, client: Optional[httpx.Client] = None):
        self.enabled = settings.recaptcha_enabled
        self.secret = settings.recaptcha_secret
        self.verify_url = settings.recaptcha_verify_url
        self.timeout = settings.recaptcha_timeout
        self.client = client

    def __call__(self, context: Optional[VerificationContext]) -> bool:
        return self.verify(context)

    def verify(self, context: Optional[VerificationContext]) -> bool:
        if not self.enabled:
            return True
        if context is None or not context.response_token:
            return False

        data = {"secret": self.secret or "", "response": context.response_token}
        if context.remote_ip:
            data["remoteip"] = context.remote_ip

        try:
            if self.client is not None:
                response = self.client.post(self.verify_url, data=data, timeout=self.timeout)
            else:
                response = httpx.post(self.verify_url, data=data, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("reCAPTCHA verification failed: %s", e)
            return False

        success = bool(result.get("success", False))
        if not success:
            logger.info("reCAPTCHA rejected: %s", result.get("error-codes", []))
        return success
