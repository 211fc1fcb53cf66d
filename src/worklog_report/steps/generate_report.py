"""pypyr step: generate a user's monthly timesheet report.

Defaults to the month before today (in the reporting zone), which is
what a scheduled run on the first of the month wants.

Usage in a pipeline YAML::

    steps:
      - name: worklog_report.steps.generate_report

Context keys consumed:
    conn (sqlite3.Connection): An initialised database connection.
    user_id (int | str): The user whose report to build.
    zone_id (str, optional): Reporting zone.  Falls back to
        ``WORKLOG_REPORT_ZONE`` / ``Europe/Bucharest``.
    month (int, optional), year (int, optional): Report month.  Both
        default to the previous month.

Context keys produced:
    report (ReportDocument): The generated report.
    zone_id, month, year: The resolved values.
"""

import datetime
import logging

from worklog_report.config import load_settings
from worklog_report.db.manager import SqliteWorkLogStore
from worklog_report.reporting.generator import ReportGenerator
from worklog_report.reporting.interval import previous_month, resolve_zone

logger = logging.getLogger(__name__)


def run_step(context: dict) -> None:
    """pypyr entry-point: build the report and store it in the context.

    Args:
        context: The mutable pypyr context dictionary.
    """
    conn = context["conn"]
    user_id = context["user_id"]
    zone_id = context.get("zone_id") or load_settings().zone_id

    month = context.get("month")
    year = context.get("year")
    if month is None or year is None:
        today = datetime.datetime.now(resolve_zone(zone_id)).date()
        year, month = previous_month(today)

    generator = ReportGenerator(SqliteWorkLogStore(conn))
    report = generator.generate(user_id, int(month), int(year), zone_id)

    context["report"] = report
    context["zone_id"] = zone_id
    context["month"] = int(month)
    context["year"] = int(year)

    logger.info("Monthly report %s generated (%d lines)",
                report.filename, report.record_count)
