"""
Tests for the SMTP notifier.
"""
import smtplib
from unittest.mock import MagicMock, patch

import pytest

from stockreport.config import Settings
from stockreport.exceptions import DeliveryError
from stockreport.mailer.service import GMAIL_HOST, EmailNotifier


def make_settings(**overrides):
    values = {
        "email_user": "bot@example.com",
        "email_pass": "app-password",
        "email_to": "investor@example.com",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestEmailNotifier:
    def test_defaults_to_gmail(self):
        notifier = EmailNotifier(make_settings())
        assert (notifier.host, notifier.port) == (GMAIL_HOST, 587)
        assert not notifier.implicit_tls

    def test_custom_host_with_implicit_tls(self):
        notifier = EmailNotifier(make_settings(smtp_host="mail.example.com", smtp_port=465, smtp_secure=True))
        assert (notifier.host, notifier.port) == ("mail.example.com", 465)
        assert notifier.implicit_tls

    def test_message_headers(self):
        msg = EmailNotifier(make_settings()).build_message("Stock Report", "<p>hi</p>")
        assert msg["From"] == "bot@example.com"
        assert msg["To"] == "investor@example.com"
        assert msg["Subject"] == "Stock Report"

    async def test_send_uses_starttls(self):
        with patch("stockreport.mailer.service.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value = smtp_cls.return_value
            await EmailNotifier(make_settings()).send("Stock Report", "<p>hi</p>")

        smtp_cls.assert_called_once_with(GMAIL_HOST, 587, timeout=30.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("bot@example.com", "app-password")
        server.send_message.assert_called_once()

    async def test_smtp_failure_raises_delivery_error(self):
        with patch("stockreport.mailer.service.smtplib.SMTP") as smtp_cls:
            server = MagicMock()
            smtp_cls.return_value = server
            server.__enter__.return_value = server
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
            with pytest.raises(DeliveryError, match="Failed to send email"):
                await EmailNotifier(make_settings()).send("Stock Report", "<p>hi</p>")

    async def test_missing_credentials(self):
        with pytest.raises(DeliveryError, match="credentials"):
            await EmailNotifier(make_settings(email_pass="")).send("s", "h")
