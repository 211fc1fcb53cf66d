"""Generate monthly timesheet reports and optionally email them.

The generator owns no state of its own: the record store and the email
sender are passed in, and every call runs interval computation, one
store query, formatting and (for email) one send, in that order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from worklog_report.errors import DeliveryFailureError, NotFoundError, ReportError
from worklog_report.models import ReportDocument, ReportRequest, WorkLog
from worklog_report.reporting.formatter import format_lines
from worklog_report.reporting.interval import month_interval, resolve_zone
from worklog_report.reporting.sender import EmailSender

logger = logging.getLogger(__name__)

WORK_LOG_ENTITY = "WorkLog"

EMAIL_SUBJECT = "Monthly Worklog Report"
EMAIL_BODY = "Attached is your monthly worklog report."


class WorkLogStore(Protocol):
    def find_by_user_and_instant_range(
        self,
        user_id: int | str,
        start_millis: int,
        end_millis: int,
    ) -> Sequence[WorkLog]: ...


class ReportGenerator:
    """Build a user's monthly report from a ``WorkLogStore``."""

    def __init__(self, store: WorkLogStore, sender: EmailSender | None = None) -> None:
        self.store = store
        self.sender = sender

    def generate(
        self,
        user_id: int | str,
        month: int,
        year: int,
        zone_id: str,
    ) -> ReportDocument:
        """Return the report for *user_id* in *month*/*year*.

        Records are written in the order the store returns them.

        Raises:
            InvalidArgumentError: Bad month, year or zone (before any I/O).
            NotFoundError: The user has no work logs in that month.
            StoreUnavailableError: The store query failed.
        """
        ReportRequest(
            user_id=user_id, month=month, year=year, zone_id=zone_id
        ).validate()
        interval = month_interval(year, month, zone_id)
        zone = resolve_zone(zone_id)

        work_logs = self.store.find_by_user_and_instant_range(
            user_id, interval.start_millis, interval.end_millis
        )
        if not work_logs:
            raise NotFoundError(WORK_LOG_ENTITY, user_id, month, year)

        lines = format_lines(work_logs, zone)
        document = ReportDocument(
            request=ReportRequest(
                user_id=user_id, month=month, year=year, zone_id=zone.key
            ),
            lines=tuple(lines),
            total_millis=sum(log.duration_millis for log in work_logs),
        )

        logger.info(
            "Generated report for user %s, %d-%02d: %d work logs, %.2f hours",
            user_id, year, month, document.record_count, document.total_hours,
        )
        return document

    def generate_and_email(
        self,
        user_id: int | str,
        recipient_email: str,
        month: int,
        year: int,
        zone_id: str,
    ) -> ReportDocument:
        """Generate the monthly report and send it as a CSV attachment.

        The sender is invoked only after the report was generated, and at
        most once.

        Raises:
            NotFoundError: No work logs; nothing is sent.
            DeliveryFailureError: No sender is configured or it failed.
        """
        if self.sender is None:
            raise DeliveryFailureError(
                "No email sender configured", recipient=recipient_email
            )

        document = self.generate(user_id, month, year, zone_id)
        self.email_document(document, recipient_email)
        return document

    def email_document(self, document: ReportDocument, recipient_email: str) -> None:
        """Send an already generated *document* to *recipient_email*."""
        if self.sender is None:
            raise DeliveryFailureError(
                "No email sender configured", recipient=recipient_email
            )

        try:
            self.sender.send(
                recipient_email,
                EMAIL_SUBJECT,
                EMAIL_BODY,
                document.as_attachment(),
            )
        except ReportError:
            raise
        except Exception as exc:
            logger.error("Email delivery to %s failed: %s", recipient_email, exc)
            raise DeliveryFailureError(
                f"Email delivery failed: {exc}", recipient=recipient_email
            ) from exc

        logger.info(
            "Report %s emailed to %s", document.filename, recipient_email
        )
