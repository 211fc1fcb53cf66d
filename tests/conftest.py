"""Shared pytest fixtures for the worklog-report test suite.

Provides:
    tmp_db          -- in-memory SQLite connection with full schema applied
    utc_millis      -- helper turning a UTC wall-clock time into epoch millis
    recording_sender -- email sender that keeps every message it was given
    failing_sender  -- email sender whose every send fails

``FakeStore`` and ``FailingSender`` are importable for tests that need
canned records or a specific transport error.
"""

import datetime

import pytest

from worklog_report.db.manager import get_connection, init_db
from worklog_report.reporting.interval import to_millis


def _utc_millis(year, month, day, hour=0, minute=0, second=0, millisecond=0):
    """Return epoch milliseconds for a UTC wall-clock time."""
    moment = datetime.datetime(
        year, month, day, hour, minute, second, millisecond * 1000,
        tzinfo=datetime.timezone.utc,
    )
    return to_millis(moment)


class FakeStore:
    """Store returning canned work logs; bounds are honoured inclusively."""

    def __init__(self, work_logs=None, error=None):
        self.work_logs = list(work_logs or [])
        self.error = error
        self.calls = []

    def find_by_user_and_instant_range(self, user_id, start_millis, end_millis):
        self.calls.append((user_id, start_millis, end_millis))
        if self.error is not None:
            raise self.error
        return [
            log for log in self.work_logs
            if str(log.user_id) == str(user_id)
            and start_millis <= log.start_millis <= end_millis
        ]


class RecordingSender:
    def __init__(self):
        self.sent = []

    def send(self, recipient, subject, body_text, attachment):
        self.sent.append((recipient, subject, body_text, attachment))


class FailingSender:
    def __init__(self, error=None):
        self.error = error or ConnectionRefusedError("smtp down")
        self.attempts = 0

    def send(self, recipient, subject, body_text, attachment):
        self.attempts += 1
        raise self.error


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def tmp_db():
    """Create an in-memory SQLite connection with the full schema applied.

    Yields the connection and closes it after the test.
    """
    conn = get_connection(":memory:")
    init_db(conn)
    yield conn
    conn.close()


@pytest.fixture()
def utc_millis():
    return _utc_millis


@pytest.fixture()
def recording_sender():
    return RecordingSender()


@pytest.fixture()
def failing_sender():
    return FailingSender()
