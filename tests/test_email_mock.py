import pytest
from unittest.mock import patch, MagicMock

from app.core.config import settings
from app.services.email_service import send_permission_update_email, send_welcome_email


@pytest.fixture
def smtp_configured():
    with patch.object(settings, "SMTP_HOST", "smtp.example.com"), \
            patch.object(settings, "SMTP_PORT", 587), \
            patch.object(settings, "SMTP_USER", "mailer"), \
            patch.object(settings, "SMTP_PASSWORD", "secret"):
        yield


@patch("app.services.email_service.smtplib.SMTP")
def test_send_welcome_email(mock_smtp, smtp_configured):
    mock_server_instance = MagicMock()
    mock_smtp.return_value.__enter__.return_value = mock_server_instance

    send_welcome_email({
        "full_name": "Asha Rao",
        "username": "rao010204",
        "role": "student",
        "email": "asha@example.com",
    })

    mock_smtp.assert_called_with("smtp.example.com", 587)
    mock_server_instance.starttls.assert_called()
    mock_server_instance.login.assert_called_with("mailer", "secret")
    recipient = mock_server_instance.sendmail.call_args[0][1]
    assert recipient == "asha@example.com"


@patch("app.services.email_service.smtplib.SMTP")
def test_send_permission_update_email(mock_smtp, smtp_configured):
    mock_server_instance = MagicMock()
    mock_smtp.return_value.__enter__.return_value = mock_server_instance

    send_permission_update_email({
        "email": "asha@example.com",
        "name": "Asha",
        "subject": "Late lab hours",
        "status": "approved",
        "response": "Granted until 9pm",
        "handler": "Chair",
    })

    mock_server_instance.sendmail.assert_called()
    assert mock_server_instance.sendmail.call_args[0][1] == "asha@example.com"


@patch("app.services.email_service.smtplib.SMTP")
def test_skipped_without_smtp_host(mock_smtp):
    with patch.object(settings, "SMTP_HOST", None):
        send_welcome_email({"email": "asha@example.com", "username": "asha"})
    mock_smtp.assert_not_called()


@patch("app.services.email_service.smtplib.SMTP")
def test_skipped_without_recipient(mock_smtp, smtp_configured):
    send_permission_update_email({"email": None, "subject": "x", "status": "approved"})
    mock_smtp.assert_not_called()


@patch("app.services.email_service.smtplib.SMTP", side_effect=OSError("connection refused"))
def test_smtp_failure_is_swallowed(mock_smtp, smtp_configured):
    # Must not raise: mail runs in a background task after the response
    send_welcome_email({"email": "asha@example.com", "username": "asha"})
    mock_smtp.assert_called()
