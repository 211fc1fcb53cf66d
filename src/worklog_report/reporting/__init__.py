"""Reporting sub-package for the worklog-report project.

Exports the main public pieces:

- ``ReportGenerator`` -- build a monthly report from a work-log store and
  optionally email it.
- ``ReportService`` -- the ``get`` / ``email`` operations with the
  configured default zone applied.
- ``format_report`` -- render work logs as CSV bytes.
- ``month_interval`` -- the closed instant range of a calendar month.
- ``SmtpEmailSender`` -- deliver a report attachment via SMTP.

Usage::

    from worklog_report.reporting import ReportGenerator

    generator = ReportGenerator(store, SmtpEmailSender())
    document = generator.generate(42, 3, 2024, "Europe/Bucharest")
"""

from worklog_report.reporting.formatter import format_report
from worklog_report.reporting.generator import ReportGenerator
from worklog_report.reporting.interval import month_interval
from worklog_report.reporting.sender import SmtpEmailSender
from worklog_report.reporting.service import ReportService

__all__ = [
    "ReportGenerator",
    "ReportService",
    "SmtpEmailSender",
    "format_report",
    "month_interval",
]
