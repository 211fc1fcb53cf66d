"""Database sub-package for the worklog-report project.

Exports the core database functions so that other modules can import
them directly from ``worklog_report.db``:

    from worklog_report.db import get_connection, init_db, SqliteWorkLogStore
"""

from worklog_report.db.manager import (
    SqliteWorkLogStore,
    find_by_user_and_instant_range,
    get_connection,
    init_db,
    insert_work_log,
)

__all__ = [
    "SqliteWorkLogStore",
    "find_by_user_and_instant_range",
    "get_connection",
    "init_db",
    "insert_work_log",
]
