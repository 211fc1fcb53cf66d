"""Exception hierarchy for worklog-report.

Every failure raised by the reporting core derives from ``ReportError`` so
callers can catch the whole family at the boundary:

- ``InvalidArgumentError`` -- bad month, year or zone; raised before any I/O.
- ``NotFoundError`` -- the user has no work logs in the requested month.
- ``StoreUnavailableError`` -- the record store failed.
- ``DeliveryFailureError`` -- the email transport failed.
"""


class ReportError(Exception):
    """Base class for all worklog-report errors."""


class InvalidArgumentError(ReportError, ValueError):
    """A caller supplied a month, year or zone the core cannot use."""


class NotFoundError(ReportError):
    """No records exist for the requested user and month."""

    def __init__(self, entity: str, user_id, month: int | None = None,
                 year: int | None = None) -> None:
        self.entity = entity
        self.user_id = user_id
        self.month = month
        self.year = year
        message = f"No {entity} records found for user {user_id}"
        if month is not None and year is not None:
            message += f" in {year}-{month:02d}"
        super().__init__(message)


class StoreUnavailableError(ReportError):
    """The record store could not answer a query."""


class DeliveryFailureError(ReportError):
    """The email transport could not deliver a report."""

    def __init__(self, message: str, recipient: str | None = None) -> None:
        self.recipient = recipient
        super().__init__(message)
