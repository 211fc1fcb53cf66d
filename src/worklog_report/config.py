"""Environment-driven settings for worklog-report.

Values are read from the process environment.  The CLI calls
``load_dotenv()`` first, so a ``.env`` file in the working directory is
honoured as well.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from worklog_report import DEFAULT_DB_PATH, DEFAULT_ZONE
from worklog_report.errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class SmtpSettings:
    host: str
    port: int
    email: str
    password: str
    timeout: float


@dataclass(frozen=True, slots=True)
class Settings:
    db_path: str
    zone_id: str
    smtp: SmtpSettings


def _float_env(name: str, default: str) -> float:
    raw = os.environ.get(name, default).strip()
    try:
        return float(raw)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Environment variable {name} must be a number"
        ) from exc


def _int_env(name: str, default: str) -> int:
    raw = os.environ.get(name, default).strip()
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Environment variable {name} must be an integer"
        ) from exc


def _check_zone(zone_id: str) -> None:
    try:
        ZoneInfo(zone_id)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidArgumentError(f"Invalid time zone: {zone_id}") from exc


def load_smtp_settings() -> SmtpSettings:
    """Read SMTP connection settings from the environment.

    Credentials are allowed to be empty here; the sender refuses to send
    without them.
    """
    return SmtpSettings(
        host=os.environ.get("SMTP_HOST", "smtp.gmail.com"),
        port=_int_env("SMTP_PORT", "465"),
        email=os.environ.get("SMTP_EMAIL", ""),
        password=os.environ.get("SMTP_PASSWORD", ""),
        timeout=_float_env("SMTP_TIMEOUT", "30"),
    )


def load_settings(
    db_path: str | None = None,
    zone_id: str | None = None,
) -> Settings:
    """Build ``Settings`` from explicit overrides and the environment.

    Args:
        db_path: Overrides ``WORKLOG_REPORT_DB`` when given.
        zone_id: Overrides ``WORKLOG_REPORT_ZONE`` when given.

    Raises:
        InvalidArgumentError: If the zone is unknown or an integer
            variable cannot be parsed.
    """
    zone = zone_id or os.environ.get("WORKLOG_REPORT_ZONE") or DEFAULT_ZONE
    _check_zone(zone)

    return Settings(
        db_path=db_path or os.environ.get("WORKLOG_REPORT_DB") or DEFAULT_DB_PATH,
        zone_id=zone,
        smtp=load_smtp_settings(),
    )
