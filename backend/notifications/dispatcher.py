"""Out-of-band delivery of verification, welcome and password-reset messages.

Dispatchers raise ``DispatchFailure`` when a message cannot be delivered; the
auth flows rely on that to roll back and report the failure.
"""

import logging
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.mime.text import MIMEText
from typing import Protocol

from backend.auth.errors import DispatchFailure
from backend.core import config
from backend.core.logging_config import redact_email
from backend.notifications import templates

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    def send_verification(self, email: str, code: str) -> None: ...

    def send_welcome(self, email: str, name: str) -> None: ...

    def send_password_reset(self, email: str, url: str) -> None: ...

    def send_reset_success(self, email: str) -> None: ...


class _TemplateDispatcher(ABC):
    def send_verification(self, email: str, code: str) -> None:
        self.deliver(email, templates.VERIFICATION_SUBJECT, templates.VERIFICATION_TEMPLATE.format(code=code))

    def send_welcome(self, email: str, name: str) -> None:
        self.deliver(email, templates.WELCOME_SUBJECT, templates.WELCOME_TEMPLATE.format(name=name))

    def send_password_reset(self, email: str, url: str) -> None:
        self.deliver(
            email,
            templates.PASSWORD_RESET_SUBJECT,
            templates.PASSWORD_RESET_TEMPLATE.format(reset_url=url),
        )

    def send_reset_success(self, email: str) -> None:
        self.deliver(email, templates.RESET_SUCCESS_SUBJECT, templates.RESET_SUCCESS_TEMPLATE)

    @abstractmethod
    def deliver(self, email: str, subject: str, body: str) -> None: ...


class SmtpNotificationDispatcher(_TemplateDispatcher):
    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        from_email: str = "",
        from_name: str = "Classroom Auth",
        timeout: float = 30,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.from_email = from_email or user
        self.from_name = from_name
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.use_tls:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            try:
                server.starttls(context=context)
            except (smtplib.SMTPException, OSError):
                server.close()
                raise
        else:
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout)
        return server

    def deliver(self, email: str, subject: str, body: str) -> None:
        message = MIMEText(body, "plain")
        message["Subject"] = subject
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = email

        try:
            with self._connect() as server:
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.sendmail(self.from_email, [email], message.as_string())
        except (smtplib.SMTPException, OSError, UnicodeError) as exc:
            logger.error("Failed to send '%s' to %s: %s", subject, redact_email(email), exc)
            raise DispatchFailure() from exc

        logger.info("Sent '%s' to %s", subject, redact_email(email))


class LoggingNotificationDispatcher(_TemplateDispatcher):
    """Writes messages to the log instead of sending them, for local development."""

    def deliver(self, email: str, subject: str, body: str) -> None:
        logger.info("Email to %s (not sent, SMTP not configured): %s\n%s", redact_email(email), subject, body)


def build_dispatcher() -> NotificationDispatcher:
    if not config.SMTP_HOST:
        logger.warning("SMTP_HOST is not set; emails will be logged instead of sent.")
        return LoggingNotificationDispatcher()
    return SmtpNotificationDispatcher(
        host=config.SMTP_HOST,
        port=config.SMTP_PORT,
        user=config.SMTP_USER,
        password=config.SMTP_PASSWORD,
        use_tls=config.SMTP_USE_TLS,
        from_email=config.EMAIL_FROM,
        from_name=config.EMAIL_FROM_NAME,
    )
