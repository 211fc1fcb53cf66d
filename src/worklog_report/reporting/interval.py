"""Calendar-month windows in a given time zone.

Both boundaries are built from their own zone-local wall-clock time and
then treated as absolute instants, so a daylight-saving change inside
the month shifts the end boundary's offset independently of the start.
"""

from __future__ import annotations

import calendar
import datetime
import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from worklog_report.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
_ONE_MILLI = datetime.timedelta(milliseconds=1)


def to_millis(moment: datetime.datetime) -> int:
    """Return epoch milliseconds for an aware datetime, floored."""
    return (moment - EPOCH) // _ONE_MILLI


def from_millis(millis: int) -> datetime.datetime:
    """Return the UTC datetime for *millis* epoch milliseconds."""
    return EPOCH + datetime.timedelta(milliseconds=millis)


def resolve_zone(zone_id: str | ZoneInfo) -> ZoneInfo:
    """Return a ``ZoneInfo`` for an IANA zone name.

    Raises:
        InvalidArgumentError: If *zone_id* is empty, malformed or unknown.
    """
    if isinstance(zone_id, ZoneInfo):
        return zone_id
    if not isinstance(zone_id, str) or not zone_id.strip():
        raise InvalidArgumentError(f"Invalid time zone: {zone_id!r}")
    try:
        return ZoneInfo(zone_id.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidArgumentError(f"Unknown time zone: {zone_id}") from exc


@dataclass(frozen=True, slots=True)
class MonthInterval:
    """Closed instant range ``[start, end]`` covering one calendar month."""

    start: datetime.datetime
    end: datetime.datetime

    @property
    def start_millis(self) -> int:
        return to_millis(self.start)

    @property
    def end_millis(self) -> int:
        return to_millis(self.end)

    def contains(self, millis: int) -> bool:
        return self.start_millis <= millis <= self.end_millis


def validate_month(month: int, year: int) -> None:
    """Reject a month outside 1-12 or a year datetime cannot represent."""
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidArgumentError(f"Month must be between 1 and 12, got {month!r}")
    if (isinstance(year, bool) or not isinstance(year, int)
            or not datetime.MINYEAR <= year <= datetime.MAXYEAR):
        raise InvalidArgumentError(f"Year out of range: {year!r}")


def month_interval(year: int, month: int, zone_id: str | ZoneInfo) -> MonthInterval:
    """Return the closed interval spanning *month*/*year* in *zone_id*.

    The start is local midnight on day 1; the end is local
    23:59:59.999999 on the month's last day (28-31, leap years included).

    Raises:
        InvalidArgumentError: For a bad month, year or zone.
    """
    validate_month(month, year)
    zone = resolve_zone(zone_id)

    last_day = calendar.monthrange(year, month)[1]
    start = datetime.datetime(year, month, 1, tzinfo=zone)
    end = datetime.datetime(year, month, last_day, 23, 59, 59, 999_999, tzinfo=zone)

    logger.debug("Month interval %d-%02d in %s: %s .. %s",
                 year, month, zone.key, start.isoformat(), end.isoformat())
    return MonthInterval(start=start, end=end)


def current_month(
    zone_id: str | ZoneInfo,
    now: datetime.datetime | None = None,
) -> tuple[int, int]:
    """Return ``(year, month)`` of the current moment in *zone_id*."""
    zone = resolve_zone(zone_id)
    local = (now or datetime.datetime.now(datetime.timezone.utc)).astimezone(zone)
    return local.year, local.month


def previous_month(today: datetime.date) -> tuple[int, int]:
    """Return ``(year, month)`` of the calendar month before *today*."""
    first = today.replace(day=1)
    last_of_previous = first - datetime.timedelta(days=1)
    return last_of_previous.year, last_of_previous.month
