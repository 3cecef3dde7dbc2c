import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import structlog

from stockreport.config import Settings
from stockreport.exceptions import DeliveryError

logger = structlog.get_logger()

GMAIL_HOST = "smtp.gmail.com"
GMAIL_PORT = 587


class EmailNotifier:
    """Sends HTML reports over SMTP; falls back to Gmail when no host is configured."""

    def __init__(self, settings: Settings, timeout: float = 30.0) -> None:
        self._settings = settings
        self._timeout = timeout

    @property
    def host(self) -> str:
        return self._settings.smtp_host or GMAIL_HOST

    @property
    def port(self) -> int:
        return self._settings.smtp_port if self._settings.smtp_host else GMAIL_PORT

    def build_message(self, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self._settings.email_user
        msg["To"] = ", ".join(self._settings.recipients)
        msg["Subject"] = subject
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    @property
    def implicit_tls(self) -> bool:
        return bool(self._settings.smtp_host and self._settings.smtp_secure)

    def _send_sync(self, msg: MIMEMultipart) -> None:
        if self.implicit_tls:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self._timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self._timeout)
        with server:
            if not self.implicit_tls:
                server.starttls()
            server.login(self._settings.email_user, self._settings.email_pass)
            server.send_message(msg, to_addrs=self._settings.recipients)

    async def send(self, subject: str, html: str) -> None:
        recipients = self._settings.recipients
        if not recipients:
            raise DeliveryError("No email recipient configured")
        if not self._settings.has_email_config:
            raise DeliveryError("Email credentials are not configured")

        msg = self.build_message(subject, html)
        try:
            await asyncio.to_thread(self._send_sync, msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("email_send_failed", host=self.host, error=str(exc))
            raise DeliveryError(f"Failed to send email: {exc}") from exc

        logger.info("email_sent", subject=subject, recipients=recipients)
