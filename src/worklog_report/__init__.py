"""worklog-report: Monthly timesheet reports from recorded work sessions."""

__version__ = "0.1.0"

import os
import pathlib

DEFAULT_DB_PATH = os.path.join(
    os.path.expanduser("~"), ".worklog-report", "worklog.db"
)

DEFAULT_ZONE = "Europe/Bucharest"

PACKAGE_DIR = pathlib.Path(__file__).parent
