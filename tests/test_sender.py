"""Tests for the SMTP email sender.

``smtplib.SMTP_SSL`` is patched throughout; no network calls are made.
"""

import logging
import smtplib
from unittest.mock import MagicMock, patch

import pytest

from worklog_report.config import SmtpSettings
from worklog_report.errors import DeliveryFailureError
from worklog_report.models import Attachment
from worklog_report.reporting.sender import SmtpEmailSender, build_message

CSV = b"2024-03-01 12:00,2024-03-01 13:00,1.00\n"


def _settings(**overrides) -> SmtpSettings:
    values = {
        "host": "smtp.example.com",
        "port": 465,
        "email": "reports@example.com",
        "password": "secret",
        "timeout": 30.0,
    }
    values.update(overrides)
    return SmtpSettings(**values)


@pytest.fixture()
def attachment():
    return Attachment(filename="User-42-2024-3.csv", content=CSV)


@pytest.fixture()
def smtp_server():
    """Patch SMTP_SSL and yield (class mock, server mock)."""
    with patch("worklog_report.reporting.sender.smtplib.SMTP_SSL") as smtp_cls:
        server = MagicMock()
        smtp_cls.return_value.__enter__.return_value = server
        yield smtp_cls, server


class TestBuildMessage:

    def test_headers_body_and_attachment(self, attachment):
        msg = build_message(
            "reports@example.com", "boss@example.com",
            "Monthly Worklog Report", "Attached is your monthly worklog report.",
            attachment,
        )

        assert msg["Subject"] == "Monthly Worklog Report"
        assert msg["To"] == "boss@example.com"
        assert msg["From"] == "reports@example.com"

        body, part = msg.get_payload()
        assert body.get_content_type() == "text/plain"
        assert "monthly worklog report" in body.get_payload(decode=True).decode("utf-8")
        assert part.get_content_type() == "text/csv"
        assert part.get_filename() == "User-42-2024-3.csv"
        assert part.get_payload(decode=True) == CSV


class TestSmtpEmailSender:

    def test_sends_message(self, smtp_server, attachment):
        smtp_cls, server = smtp_server
        sender = SmtpEmailSender(_settings())

        sender.send("boss@example.com", "Subject", "Body", attachment)

        smtp_cls.assert_called_once_with("smtp.example.com", 465, timeout=30.0)
        server.login.assert_called_once_with("reports@example.com", "secret")
        server.send_message.assert_called_once()
        sent = server.send_message.call_args.args[0]
        assert sent["To"] == "boss@example.com"

    def test_missing_credentials(self, smtp_server, attachment, caplog):
        smtp_cls, _ = smtp_server
        sender = SmtpEmailSender(_settings(password=""))

        with caplog.at_level(logging.ERROR):
            with pytest.raises(DeliveryFailureError):
                sender.send("boss@example.com", "Subject", "Body", attachment)

        smtp_cls.assert_not_called()
        assert any("SMTP" in msg for msg in caplog.messages)

    def test_empty_recipient(self, smtp_server, attachment):
        smtp_cls, _ = smtp_server
        with pytest.raises(DeliveryFailureError):
            SmtpEmailSender(_settings()).send("", "Subject", "Body", attachment)
        smtp_cls.assert_not_called()

    def test_authentication_failure(self, smtp_server, attachment):
        _, server = smtp_server
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"denied")

        with pytest.raises(DeliveryFailureError) as excinfo:
            SmtpEmailSender(_settings()).send(
                "boss@example.com", "Subject", "Body", attachment
            )

        assert isinstance(excinfo.value.__cause__, smtplib.SMTPAuthenticationError)
        assert excinfo.value.recipient == "boss@example.com"

    def test_smtp_error(self, smtp_server, attachment):
        _, server = smtp_server
        server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

        with pytest.raises(DeliveryFailureError):
            SmtpEmailSender(_settings()).send(
                "boss@example.com", "Subject", "Body", attachment
            )

    def test_network_error(self, smtp_server, attachment):
        smtp_cls, _ = smtp_server
        smtp_cls.side_effect = OSError("connection refused")

        with pytest.raises(DeliveryFailureError, match="Network error"):
            SmtpEmailSender(_settings()).send(
                "boss@example.com", "Subject", "Body", attachment
            )

    def test_settings_default_from_environment(self, monkeypatch):
        monkeypatch.setenv("SMTP_HOST", "mail.example.org")
        monkeypatch.setenv("SMTP_PORT", "2465")
        sender = SmtpEmailSender()
        assert sender.settings.host == "mail.example.org"
        assert sender.settings.port == 2465
