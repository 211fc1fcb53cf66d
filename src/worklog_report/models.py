from __future__ import annotations

from dataclasses import dataclass, field

CSV_MIME_TYPE = "text/csv"


@dataclass(frozen=True, slots=True)
class WorkLog:
    """One recorded work session, as read from the record store.

    Instants are epoch milliseconds (UTC).
    """

    user_id: int | str
    start_millis: int
    duration_millis: int
    id: int | None = None

    def __post_init__(self) -> None:
        if self.duration_millis < 0:
            raise ValueError(
                f"duration_millis must be non-negative, got {self.duration_millis}"
            )

    @property
    def end_millis(self) -> int:
        return self.start_millis + self.duration_millis


@dataclass(frozen=True, slots=True)
class ReportRequest:
    user_id: int | str
    month: int
    year: int
    zone_id: str

    def validate(self) -> None:
        """Raise ``InvalidArgumentError`` for a bad month, year or zone."""
        from worklog_report.reporting.interval import resolve_zone, validate_month

        validate_month(self.month, self.year)
        resolve_zone(self.zone_id)


@dataclass(frozen=True, slots=True)
class Attachment:
    filename: str
    content: bytes
    mime_type: str = CSV_MIME_TYPE


@dataclass(frozen=True, slots=True)
class ReportDocument:
    """A rendered monthly report: one CSV line per work log."""

    request: ReportRequest
    lines: tuple[str, ...]
    total_millis: int = 0
    mime_type: str = field(default=CSV_MIME_TYPE)

    @property
    def content(self) -> bytes:
        return "".join(self.lines).encode("utf-8")

    @property
    def filename(self) -> str:
        return (
            f"User-{self.request.user_id}-{self.request.year}"
            f"-{self.request.month}.csv"
        )

    @property
    def record_count(self) -> int:
        return len(self.lines)

    @property
    def total_hours(self) -> float:
        return self.total_millis / 3_600_000

    def as_attachment(self) -> Attachment:
        return Attachment(
            filename=self.filename,
            content=self.content,
            mime_type=self.mime_type,
        )
