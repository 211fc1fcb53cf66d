"""pypyr step: email the generated monthly report.

Reads the report from ``context['report']`` and the recipient address
from context or the ``RECIPIENT_EMAIL`` environment variable, then sends
it as a CSV attachment via SMTP.  Delivery errors propagate and fail
the pipeline.

Usage in a pipeline YAML::

    steps:
      - name: worklog_report.steps.send_email

Context keys consumed:
    report (ReportDocument): The generated report.
    conn (sqlite3.Connection): An initialised database connection.
    recipient_email (str, optional): Override recipient email.  Falls
        back to the ``RECIPIENT_EMAIL`` env var.

Context keys produced:
    email_sent (bool): True once the email was dispatched.
"""

import logging
import os

from worklog_report.db.manager import SqliteWorkLogStore
from worklog_report.errors import DeliveryFailureError
from worklog_report.reporting.generator import ReportGenerator
from worklog_report.reporting.sender import SmtpEmailSender

logger = logging.getLogger(__name__)


def run_step(context: dict) -> None:
    """pypyr entry-point: send the monthly report email.

    Args:
        context: The mutable pypyr context dictionary.
    """
    report = context["report"]

    recipient = context.get("recipient_email") or os.environ.get(
        "RECIPIENT_EMAIL", ""
    )
    if not recipient:
        raise DeliveryFailureError(
            "No recipient email configured. Set recipient_email in "
            "context or RECIPIENT_EMAIL environment variable."
        )

    generator = ReportGenerator(
        SqliteWorkLogStore(context["conn"]), SmtpEmailSender()
    )
    generator.email_document(report, recipient)

    context["email_sent"] = True
    logger.info("Email sent to %s", recipient)
