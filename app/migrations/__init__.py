"""
SQL migration helpers.

Migrations are applied by splitting a ``.sql`` file on semicolons and
sending each statement through the ``exec_sql`` RPC function.
"""

from app.migrations.probes import ProbeResult, probe_columns, probe_table, probe_tables
from app.migrations.runner import (
    MigrationReport,
    MigrationRunner,
    StatementResult,
    manual_instructions,
)
from app.migrations.sql import SqlScript, load_sql_file, split_sql_statements

__all__ = [
    "MigrationReport",
    "MigrationRunner",
    "ProbeResult",
    "SqlScript",
    "StatementResult",
    "load_sql_file",
    "manual_instructions",
    "probe_columns",
    "probe_table",
    "probe_tables",
    "split_sql_statements",
]
