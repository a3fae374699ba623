import logging
import smtplib
from email.message import EmailMessage
from typing import Dict

from jugsite.config import SiteSettings
from jugsite.schemas.event import Event
from jugsite.schemas.registration import Registration

logger = logging.getLogger(__name__)

CONFIRMATION_TEMPLATES: Dict[str, Dict[str, str]] = {
    "en": {
        "subject": "Your registration for {title}",
        "body": (
            "Hello {firstName} {lastName},\n\n"
            "thank you for registering for \"{title}\" on {heldOn:%Y-%m-%d %H:%M} ({timezone}).\n"
            "{location}"
            "\nSee you there!\n{site_name}\n"
        ),
        "location": "Location: {location}\n",
    },
    "de": {
        "subject": "Deine Anmeldung zu {title}",
        "body": (
            "Hallo {firstName} {lastName},\n\n"
            "vielen Dank für Deine Anmeldung zu \"{title}\" am {heldOn:%d.%m.%Y %H:%M} ({timezone}).\n"
            "{location}"
            "\nBis bald!\n{site_name}\n"
        ),
        "location": "Ort: {location}\n",
    },
}


def send_email_via_service(
    settings: SiteSettings, email: str, subject: str, body: str
) -> bool:
    """Deliver one mail over SMTP; without a configured host the mail is only logged"""
    if not settings.smtp_host:
        logger.info("Sending email to %s: %s", email, subject)
        return True

    message = EmailMessage()
    message["From"] = settings.mail_from
    message["To"] = email
    message["Subject"] = subject
    message.set_content(body)

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as smtp:
        smtp.send_message(message)
    return True


class EmailService:
    def __init__(self, settings: SiteSettings):
        self.settings = settings

    def resolve_locale(self, locale: str) -> str:
        language = (locale or "").split("-")[0].split("_")[0].lower()
        if language in CONFIRMATION_TEMPLATES:
            return language
        return self.settings.default_locale

    def build_confirmation_mail(
        self, registration: Registration, event: Event, locale: str
    ) -> Dict[str, str]:
        """Subject and body of the confirmation mail in the given locale"""
        template = CONFIRMATION_TEMPLATES[self.resolve_locale(locale)]

        location = ""
        if event.location:
            lines = [line.strip() for line in event.location.splitlines() if line.strip()]
            location = template["location"].format(location=", ".join(lines))

        values = {
            "firstName": registration.firstName,
            "lastName": registration.lastName,
            "title": event.title,
            "heldOn": event.heldOn,
            "timezone": event.heldOn.tzname() or "UTC",
            "location": location,
            "site_name": self.settings.site_name,
        }
        return {
            "subject": template["subject"].format(**values),
            "body": template["body"].format(**values),
        }

    def send_confirmation_mail(
        self, registration: Registration, event: Event, locale: str
    ) -> bool:
        """Send the registration confirmation; failures are logged, never raised"""
        try:
            mail = self.build_confirmation_mail(registration, event, locale)
            success = send_email_via_service(
                self.settings, registration.email, mail["subject"], mail["body"]
            )
        except Exception:
            logger.exception(
                "Failed to send confirmation mail for event %s", registration.eventId
            )
            return False

        if not success:
            logger.error("Email service returned failure for event %s", registration.eventId)
        return success
