"""Database manager for the worklog-report project.

Provides connection management, schema initialization, and query helpers
for the SQLite work-log store.  Module-level functions take a connection
as their first parameter and do not manage global state;
``SqliteWorkLogStore`` adapts them to the store interface the report
generator consumes.

Any ``sqlite3.Error`` raised while reading or writing is re-raised as
``StoreUnavailableError``.
"""

import logging
import pathlib
import sqlite3

from worklog_report.errors import StoreUnavailableError
from worklog_report.models import WorkLog

logger = logging.getLogger(__name__)


def get_connection(db_path: str) -> sqlite3.Connection:
    """Open a SQLite connection with Row factory enabled.

    Args:
        db_path: Filesystem path to the SQLite database file, or ":memory:"
                 for an in-memory database.

    Returns:
        A ``sqlite3.Connection`` configured with ``sqlite3.Row`` as
        ``row_factory``.

    Raises:
        StoreUnavailableError: If the database cannot be opened.
    """
    try:
        conn = sqlite3.connect(db_path)
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"Cannot open database {db_path}: {exc}") from exc
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes by executing ``schema.sql``.

    The SQL file is located relative to this module using ``__file__``
    so it works regardless of the current working directory.

    Args:
        conn: An open SQLite connection.
    """
    schema_path = pathlib.Path(__file__).with_name("schema.sql")
    schema_sql = schema_path.read_text(encoding="utf-8")
    try:
        conn.executescript(schema_sql)
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"Schema initialization failed: {exc}") from exc
    logger.info("Database schema initialized from %s", schema_path)


def insert_work_log(
    conn: sqlite3.Connection,
    user_id,
    start_millis: int,
    duration_millis: int,
) -> int:
    """Insert one work session and return its ``id``.

    Args:
        conn: An open SQLite connection.
        user_id: Owner of the session; stored as text.
        start_millis: Session start, epoch milliseconds (UTC).
        duration_millis: Non-negative session length in milliseconds.

    Raises:
        ValueError: If *duration_millis* is negative.
        StoreUnavailableError: If the insert fails.
    """
    if duration_millis < 0:
        raise ValueError(
            f"duration_millis must be non-negative, got {duration_millis}"
        )

    sql = """
        INSERT INTO work_logs (user_id, start_millis, duration_millis)
        VALUES (:user_id, :start_millis, :duration_millis)
    """
    params = {
        "user_id": str(user_id),
        "start_millis": start_millis,
        "duration_millis": duration_millis,
    }
    try:
        cursor = conn.execute(sql, params)
        conn.commit()
    except sqlite3.Error as exc:
        raise StoreUnavailableError(f"Cannot insert work log: {exc}") from exc

    logger.info("Saved work log id=%d for user %s (%d ms)",
                cursor.lastrowid, user_id, duration_millis)
    return cursor.lastrowid


def find_by_user_and_instant_range(
    conn: sqlite3.Connection,
    user_id,
    start_millis: int,
    end_millis: int,
) -> list[WorkLog]:
    """Return the user's work logs starting within ``[start, end]``.

    Both bounds are inclusive.  Rows come back ordered by start instant
    (then ``id``) so that reports built from this store are stable.

    Args:
        conn: An open SQLite connection.
        user_id: The owning user.
        start_millis: Inclusive lower bound, epoch milliseconds.
        end_millis: Inclusive upper bound, epoch milliseconds.

    Raises:
        StoreUnavailableError: If the query fails.
    """
    sql = """
        SELECT id, user_id, start_millis, duration_millis
        FROM work_logs
        WHERE user_id = :user_id
          AND start_millis BETWEEN :start_millis AND :end_millis
        ORDER BY start_millis, id
    """
    params = {
        "user_id": str(user_id),
        "start_millis": start_millis,
        "end_millis": end_millis,
    }
    try:
        rows = conn.execute(sql, params).fetchall()
    except sqlite3.Error as exc:
        logger.error("Work log query failed for user %s: %s", user_id, exc)
        raise StoreUnavailableError(f"Work log query failed: {exc}") from exc

    logger.debug("Found %d work logs for user %s in [%d, %d]",
                 len(rows), user_id, start_millis, end_millis)
    return [
        WorkLog(
            user_id=row["user_id"],
            start_millis=row["start_millis"],
            duration_millis=row["duration_millis"],
            id=row["id"],
        )
        for row in rows
    ]


def get_work_log_count(conn: sqlite3.Connection) -> int:
    """Return the total number of rows in the ``work_logs`` table."""
    row = conn.execute("SELECT COUNT(*) AS cnt FROM work_logs").fetchone()
    return row["cnt"]


class SqliteWorkLogStore:
    """Work-log store backed by an open SQLite connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def find_by_user_and_instant_range(
        self,
        user_id,
        start_millis: int,
        end_millis: int,
    ) -> list[WorkLog]:
        return find_by_user_and_instant_range(
            self.conn, user_id, start_millis, end_millis
        )
