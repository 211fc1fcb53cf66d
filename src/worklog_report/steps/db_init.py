"""pypyr step: open the work-log database.

Reads ``db_path`` from the pypyr context (defaulting to the configured
``WORKLOG_REPORT_DB`` path), opens a connection, runs the schema
migration, and stores the live connection back into the context so
that downstream steps can reuse it.

Usage in a pipeline YAML::

    steps:
      - name: worklog_report.steps.db_init

Context keys consumed:
    conn (sqlite3.Connection, optional): A connection owned by the caller;
        when present it is reused and left open.
    db_path (str, optional): Path to the SQLite database file.

Context keys produced:
    conn (sqlite3.Connection): The initialised database connection.
    db_path (str): The resolved database path.
"""

import logging
import pathlib

from worklog_report.config import load_settings
from worklog_report.db.manager import get_connection, init_db

logger = logging.getLogger(__name__)


def run_step(context: dict) -> None:
    """pypyr entry-point: open DB connection and initialise schema.

    Args:
        context: The mutable pypyr context dictionary.
    """
    if context.get("conn") is not None:
        init_db(context["conn"])
        logger.info("Reusing the database connection from the context")
        return

    db_path: str = context.get("db_path") or load_settings().db_path

    # Ensure the parent directory exists for file-based databases.
    if db_path != ":memory:":
        parent = pathlib.Path(db_path).parent
        parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    init_db(conn)

    context["conn"] = conn
    context["db_path"] = db_path

    logger.info("Database initialised at %s", db_path)
