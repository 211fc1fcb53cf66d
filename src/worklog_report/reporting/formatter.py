"""Render work logs as timesheet CSV lines.

Each line reads ``start,end,hours`` where *start* and *end* are zone-local
``YYYY-MM-DD HH:mm`` timestamps and *hours* has exactly two decimals,
rounded half-up.  No header row is written and no field is quoted; none
of the three fields can contain a comma or a newline.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from worklog_report.models import WorkLog
from worklog_report.reporting.interval import from_millis, resolve_zone

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

_MILLIS_PER_HOUR = Decimal(3_600_000)
_TWO_PLACES = Decimal("0.01")


def format_timestamp(millis: int, zone: ZoneInfo) -> str:
    """Return *millis* as zone-local ``YYYY-MM-DD HH:mm``."""
    return from_millis(millis).astimezone(zone).strftime(TIMESTAMP_FORMAT)


def format_hours(duration_millis: int) -> str:
    """Return *duration_millis* in hours with two decimals, half-up.

    >>> format_hours(3_630_000)
    '1.01'
    """
    hours = Decimal(duration_millis) / _MILLIS_PER_HOUR
    return str(hours.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def format_line(work_log: WorkLog, zone: ZoneInfo) -> str:
    start = format_timestamp(work_log.start_millis, zone)
    end = format_timestamp(work_log.end_millis, zone)
    return f"{start},{end},{format_hours(work_log.duration_millis)}\n"


def format_lines(work_logs: Iterable[WorkLog], zone_id: str | ZoneInfo) -> list[str]:
    """Format *work_logs* in the order given; no sorting is applied."""
    zone = resolve_zone(zone_id)
    return [format_line(log, zone) for log in work_logs]


def format_report(work_logs: Iterable[WorkLog], zone_id: str | ZoneInfo) -> bytes:
    """Return the UTF-8 encoded CSV report for *work_logs*."""
    lines = format_lines(work_logs, zone_id)
    logger.debug("Formatted %d report lines", len(lines))
    return "".join(lines).encode("utf-8")
