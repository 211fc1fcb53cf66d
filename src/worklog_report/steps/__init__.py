"""pypyr steps for the worklog-report pipelines."""
