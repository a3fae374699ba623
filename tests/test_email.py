from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from jugsite.config import SiteSettings
from jugsite.schemas.registration import Registration
from jugsite.services.email_service import EmailService, send_email_via_service


@pytest.fixture
def email_service(settings):
    """Create EmailService instance with test settings"""
    return EmailService(settings)


@pytest.fixture
def registration():
    return Registration(
        eventId=23,
        email="michael@euregjug.eu",
        lastName="Simons",
        firstName="Michael",
        createdAt=datetime(2016, 7, 1, tzinfo=timezone.utc),
    )


def test_confirmation_mail_in_english(email_service, registration, reference_events):
    mail = email_service.build_confirmation_mail(registration, reference_events[0], "en-US")

    assert mail["subject"] == "Your registration for name-1"
    assert mail["body"].startswith("Hello Michael Simons,")
    assert "2016-07-07 19:00 (CEST)" in mail["body"]
    assert "Location: Am Strand, 4223 Schlaraffenland, irgendwo" in mail["body"]


def test_confirmation_mail_in_german(email_service, registration, reference_events):
    mail = email_service.build_confirmation_mail(registration, reference_events[1], "de")

    assert mail["subject"] == "Deine Anmeldung zu name-2"
    assert "22.11.2016 18:00" in mail["body"]
    assert "Ort:" not in mail["body"]


def test_unsupported_locale_falls_back_to_default(email_service):
    assert email_service.resolve_locale("fr-FR") == "en"
    assert email_service.resolve_locale("") == "en"
    assert email_service.resolve_locale("de_AT") == "de"


def test_send_confirmation_mail(email_service, registration, reference_events):
    with patch("jugsite.services.email_service.send_email_via_service") as mock_send:
        mock_send.return_value = True

        assert email_service.send_confirmation_mail(registration, reference_events[0], "de")

    mock_send.assert_called_once()
    _, email, subject, _ = mock_send.call_args.args
    assert email == "michael@euregjug.eu"
    assert subject == "Deine Anmeldung zu name-1"


def test_send_confirmation_mail_logs_failures(email_service, registration, reference_events, caplog):
    with patch(
        "jugsite.services.email_service.send_email_via_service",
        side_effect=ConnectionRefusedError("smtp down"),
    ):
        assert not email_service.send_confirmation_mail(registration, reference_events[0], "en")

    assert "Failed to send confirmation mail for event 23" in caplog.text


def test_send_email_without_smtp_host_only_logs(settings):
    with patch("jugsite.services.email_service.smtplib.SMTP") as mock_smtp:
        assert send_email_via_service(settings, "a@example.com", "Hi", "Body")

    mock_smtp.assert_not_called()


def test_send_email_over_smtp():
    settings = SiteSettings(smtp_host="mail.example.com", smtp_port=2525)

    with patch("jugsite.services.email_service.smtplib.SMTP") as mock_smtp:
        assert send_email_via_service(settings, "a@example.com", "Hi", "Body")

    mock_smtp.assert_called_once_with("mail.example.com", 2525, timeout=10)
    smtp = mock_smtp.return_value.__enter__.return_value
    message = smtp.send_message.call_args.args[0]
    assert message["To"] == "a@example.com"
    assert message["From"] == "info@euregjug.eu"
    assert message["Subject"] == "Hi"
