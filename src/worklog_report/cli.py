"""Click CLI for worklog-report.

Commands:
    init-db      -- Create the work-log database schema.
    add-session  -- Record one work session.
    download     -- Write a user's monthly report as CSV.
    email        -- Email a user's monthly report as a CSV attachment.
    pipeline     -- Invoke a pypyr pipeline (monthly).
"""

from __future__ import annotations

import datetime
import logging
import os

import click
from dotenv import load_dotenv

from worklog_report.errors import NotFoundError, ReportError

logger = logging.getLogger("worklog_report.cli")

DEFAULT_DOWNLOAD_NAME = "worklog.csv"


def _ensure_db_dir(db_path: str) -> None:
    """Create parent directory for the database file if it does not exist."""
    parent = os.path.dirname(db_path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _fail(exc: ReportError) -> None:
    """Print *exc* (NotFound in yellow, anything else in red) and exit 1."""
    if isinstance(exc, NotFoundError):
        logger.warning("%s", exc)
        click.echo(click.style(f"No report available: {exc}", fg="yellow"))
    else:
        logger.error("%s", exc)
        click.echo(click.style(f"Error: {exc}", fg="red"))
    raise SystemExit(1)


def _resolve_month(zone_id: str, month: int | None, year: int | None) -> tuple[int, int]:
    """Fill a missing month or year from the current date in *zone_id*."""
    from worklog_report.reporting.interval import current_month

    current_year, current_month_number = current_month(zone_id)
    return (
        current_month_number if month is None else month,
        current_year if year is None else year,
    )


def _open_store(db_path: str):
    from worklog_report.db.manager import SqliteWorkLogStore, get_connection, init_db

    _ensure_db_dir(db_path)
    conn = get_connection(db_path)
    init_db(conn)
    return conn, SqliteWorkLogStore(conn)


@click.group()
@click.option(
    "--db",
    default=None,
    envvar="WORKLOG_REPORT_DB",
    help="Path to the SQLite database file.",
)
@click.option(
    "--zone",
    default=None,
    envvar="WORKLOG_REPORT_ZONE",
    help="IANA time zone used for reports (default: Europe/Bucharest).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, db: str | None, zone: str | None, verbose: bool) -> None:
    """worklog-report: monthly timesheet reports from recorded work sessions."""
    from worklog_report.config import load_settings

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    try:
        ctx.obj["settings"] = load_settings(db_path=db, zone_id=zone)
    except ReportError as exc:
        _fail(exc)


@main.command("init-db")
@click.pass_context
def init_db_command(ctx: click.Context) -> None:
    """Create the work-log database schema."""
    from worklog_report.db.manager import get_work_log_count

    settings = ctx.obj["settings"]
    try:
        conn, _ = _open_store(settings.db_path)
    except ReportError as exc:
        _fail(exc)

    count = get_work_log_count(conn)
    conn.close()
    click.echo(
        click.style(
            f"Database ready at {settings.db_path} ({count} work logs).",
            fg="green",
        )
    )


@main.command("add-session")
@click.option("--user", "user_id", required=True, help="Owning user id.")
@click.option(
    "--start",
    required=True,
    help="Session start as ISO 8601; naive values use the report zone.",
)
@click.option(
    "--minutes",
    required=True,
    type=click.FloatRange(min=0),
    help="Session length in minutes.",
)
@click.pass_context
def add_session(ctx: click.Context, user_id: str, start: str, minutes: float) -> None:
    """Record one work session."""
    from worklog_report.db.manager import insert_work_log
    from worklog_report.reporting.interval import resolve_zone, to_millis

    settings = ctx.obj["settings"]

    try:
        started = datetime.datetime.fromisoformat(start)
    except ValueError:
        raise click.BadParameter(f"not an ISO 8601 timestamp: {start}", param_hint="--start")
    if started.tzinfo is None:
        started = started.replace(tzinfo=resolve_zone(settings.zone_id))

    try:
        conn, _ = _open_store(settings.db_path)
        log_id = insert_work_log(
            conn, user_id, to_millis(started), round(minutes * 60_000)
        )
    except ReportError as exc:
        _fail(exc)
    conn.close()

    click.echo(click.style(f"Recorded work log {log_id} for user {user_id}.", fg="green"))


@main.command()
@click.option("--user", "user_id", required=True, help="User whose report to build.")
@click.option("--month", type=int, default=None, help="Month 1-12 (default: current).")
@click.option("--year", type=int, default=None, help="Year (default: current).")
@click.option(
    "--output",
    "-o",
    default=DEFAULT_DOWNLOAD_NAME,
    show_default=True,
    help="Destination file; '-' writes to stdout.",
)
@click.pass_context
def download(
    ctx: click.Context,
    user_id: str,
    month: int | None,
    year: int | None,
    output: str,
) -> None:
    """Write a user's monthly report as CSV."""
    from worklog_report.reporting.generator import ReportGenerator
    from worklog_report.reporting.service import ReportService

    settings = ctx.obj["settings"]
    month, year = _resolve_month(settings.zone_id, month, year)

    try:
        conn, store = _open_store(settings.db_path)
        try:
            service = ReportService(ReportGenerator(store), settings.zone_id)
            content = service.get(user_id, month, year)
        finally:
            conn.close()
    except ReportError as exc:
        _fail(exc)

    if output == "-":
        click.get_binary_stream("stdout").write(content)
        return

    with open(output, "wb") as fh:
        fh.write(content)
    click.echo(
        click.style(f"Report for {year}-{month:02d} written to {output}.", fg="green")
    )


@main.command()
@click.option("--user", "user_id", required=True, help="User whose report to send.")
@click.option(
    "--recipient",
    default=None,
    envvar="RECIPIENT_EMAIL",
    help="Email address of the report recipient.",
)
@click.option("--month", type=int, default=None, help="Month 1-12 (default: current).")
@click.option("--year", type=int, default=None, help="Year (default: current).")
@click.pass_context
def email(
    ctx: click.Context,
    user_id: str,
    recipient: str | None,
    month: int | None,
    year: int | None,
) -> None:
    """Email a user's monthly report as a CSV attachment."""
    from worklog_report.reporting.generator import ReportGenerator
    from worklog_report.reporting.sender import SmtpEmailSender
    from worklog_report.reporting.service import ReportService

    if not recipient:
        click.echo(
            click.style(
                "Error: --recipient or RECIPIENT_EMAIL env var required.",
                fg="red",
            )
        )
        raise SystemExit(1)

    settings = ctx.obj["settings"]
    month, year = _resolve_month(settings.zone_id, month, year)

    click.echo(
        click.style(
            f"Generating report for user {user_id}, {year}-{month:02d}...",
            fg="cyan",
        )
    )

    try:
        conn, store = _open_store(settings.db_path)
        try:
            generator = ReportGenerator(store, SmtpEmailSender(settings.smtp))
            ReportService(generator, settings.zone_id).email(
                user_id, recipient, month, year
            )
        finally:
            conn.close()
    except ReportError as exc:
        _fail(exc)

    click.echo(click.style(f"Report sent to {recipient}.", fg="green"))


@main.command()
@click.argument("name", type=click.Choice(["monthly"]))
@click.option("--user", "user_id", required=True, help="User whose report to send.")
@click.option(
    "--recipient",
    default=None,
    envvar="RECIPIENT_EMAIL",
    help="Email address of the report recipient.",
)
@click.option("--month", type=int, default=None, help="Month 1-12 (default: previous).")
@click.option("--year", type=int, default=None, help="Year (default: previous month's).")
@click.pass_context
def pipeline(
    ctx: click.Context,
    name: str,
    user_id: str,
    recipient: str | None,
    month: int | None,
    year: int | None,
) -> None:
    """Run a full pypyr pipeline (monthly)."""
    from pypyr import pipelinerunner
    from worklog_report import PACKAGE_DIR

    settings = ctx.obj["settings"]

    pipeline_map = {
        "monthly": "monthly_report",
    }
    pipeline_name = pipeline_map[name]
    pipeline_path = str(PACKAGE_DIR / "pipelines" / pipeline_name)

    try:
        conn, _ = _open_store(settings.db_path)
    except ReportError as exc:
        _fail(exc)

    dict_in = {
        "conn": conn,
        "db_path": settings.db_path,
        "zone_id": settings.zone_id,
        "user_id": user_id,
    }
    if recipient:
        dict_in["recipient_email"] = recipient
    if month is not None and year is not None:
        dict_in["month"] = month
        dict_in["year"] = year

    click.echo(
        click.style(f"Running pipeline: {pipeline_name}", fg="cyan")
    )

    try:
        pipelinerunner.run(pipeline_name=pipeline_path, dict_in=dict_in)
    except ReportError as exc:
        _fail(exc)
    except Exception as exc:
        logger.error("Pipeline failed: %s", exc)
        click.echo(
            click.style(f"Pipeline failed: {exc}", fg="red")
        )
        raise SystemExit(1)
    finally:
        conn.close()

    click.echo(
        click.style(f"Pipeline '{pipeline_name}' completed.", fg="green")
    )
