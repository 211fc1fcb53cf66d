"""Report operations exposed to a calling layer (CLI, web handler).

This is where the configured default zone is applied; the generator
itself always receives an explicit zone.
"""

from __future__ import annotations

import logging

from worklog_report.reporting.generator import ReportGenerator

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, generator: ReportGenerator, default_zone: str) -> None:
        self.generator = generator
        self.default_zone = default_zone

    def get(
        self,
        user_id: int | str,
        month: int,
        year: int,
        zone_id: str | None = None,
    ) -> bytes:
        """Return the CSV bytes (``text/csv``) of a user's monthly report."""
        logger.info("Report requested for user %s, %s-%s", user_id, year, month)
        document = self.generator.generate(
            user_id, month, year, zone_id or self.default_zone
        )
        return document.content

    def email(
        self,
        user_id: int | str,
        recipient_email: str,
        month: int,
        year: int,
        zone_id: str | None = None,
    ) -> None:
        """Email a user's monthly report to *recipient_email*."""
        logger.info("Report email requested for user %s, %s-%s, to %s",
                    user_id, year, month, recipient_email)
        self.generator.generate_and_email(
            user_id, recipient_email, month, year, zone_id or self.default_zone
        )
