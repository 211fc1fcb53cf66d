"""Send report emails with a CSV attachment via SMTP.

Uses stdlib ``smtplib`` and ``email.mime``.  Connection settings come
from :class:`worklog_report.config.SmtpSettings`, normally loaded from
the environment:

- ``SMTP_EMAIL`` -- sender email address (required)
- ``SMTP_PASSWORD`` -- sender password / app password (required)
- ``SMTP_HOST`` -- SMTP server hostname (default: ``smtp.gmail.com``)
- ``SMTP_PORT`` -- SMTP server port (default: ``465``)
- ``SMTP_TIMEOUT`` -- socket timeout in seconds (default: ``30``)

Every failure is logged and raised as ``DeliveryFailureError``; nothing
is retried.
"""

from __future__ import annotations

import logging
import smtplib
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from worklog_report.config import SmtpSettings, load_smtp_settings
from worklog_report.errors import DeliveryFailureError
from worklog_report.models import Attachment

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    def send(
        self,
        recipient: str,
        subject: str,
        body_text: str,
        attachment: Attachment,
    ) -> None: ...


def build_message(
    sender_email: str,
    recipient: str,
    subject: str,
    body_text: str,
    attachment: Attachment,
) -> MIMEMultipart:
    """Build a multipart message with a plain-text body and one attachment."""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = subject
    msg["From"] = sender_email
    msg["To"] = recipient

    msg.attach(MIMEText(body_text, "plain", "utf-8"))

    maintype, _, subtype = attachment.mime_type.partition("/")
    part = MIMEBase(maintype, subtype or "octet-stream")
    part.set_payload(attachment.content)
    encoders.encode_base64(part)
    part.add_header(
        "Content-Disposition", "attachment", filename=attachment.filename
    )
    msg.attach(part)

    return msg


class SmtpEmailSender:
    """Deliver messages over SMTP_SSL using the configured credentials."""

    def __init__(self, settings: SmtpSettings | None = None) -> None:
        self.settings = settings or load_smtp_settings()

    def send(
        self,
        recipient: str,
        subject: str,
        body_text: str,
        attachment: Attachment,
    ) -> None:
        """Send one email carrying *attachment*.

        Raises:
            DeliveryFailureError: On missing credentials or recipient,
                authentication failure, SMTP protocol errors, or network
                errors.
        """
        settings = self.settings

        # --- guard: missing credentials ----------------------------------
        if not settings.email or not settings.password:
            logger.error(
                "SMTP credentials not configured. "
                "Set SMTP_EMAIL and SMTP_PASSWORD environment variables to "
                "enable email delivery."
            )
            raise DeliveryFailureError(
                "SMTP credentials not configured", recipient=recipient
            )

        if not recipient:
            raise DeliveryFailureError("No recipient email address provided")

        msg = build_message(
            settings.email, recipient, subject, body_text, attachment
        )

        # --- send via SMTP_SSL -------------------------------------------
        try:
            with smtplib.SMTP_SSL(
                settings.host, settings.port, timeout=settings.timeout
            ) as server:
                server.login(settings.email, settings.password)
                server.send_message(msg)

        except smtplib.SMTPAuthenticationError as exc:
            logger.error(
                "SMTP authentication failed. Check SMTP_EMAIL and "
                "SMTP_PASSWORD environment variables."
            )
            raise DeliveryFailureError(
                "SMTP authentication failed", recipient=recipient
            ) from exc

        except smtplib.SMTPException as exc:
            logger.error("SMTP error while sending email: %s", exc)
            raise DeliveryFailureError(
                f"SMTP error: {exc}", recipient=recipient
            ) from exc

        except OSError as exc:
            logger.error(
                "Network error while connecting to %s:%d: %s",
                settings.host, settings.port, exc,
            )
            raise DeliveryFailureError(
                f"Network error: {exc}", recipient=recipient
            ) from exc

        logger.info("Email sent successfully to %s", recipient)
