"""
Post-migration checks that only need table access.

With only a REST key we cannot inspect the catalog, so we ask for a
single row and read the error message instead.
"""

from dataclasses import dataclass

import structlog
from supabase import Client

logger = structlog.get_logger()


@dataclass
class ProbeResult:
    table: str
    exists: bool
    columns: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.exists and self.error is None


def _is_missing_relation(message: str) -> bool:
    message = message.lower()
    return "does not exist" in message or "could not find the table" in message


def _is_missing_column(message: str) -> bool:
    message = message.lower()
    return "column" in message and (
        "does not exist" in message or "could not find" in message
    )


def probe_table(client: Client, table: str) -> ProbeResult:
    """Check that a table is reachable with the client's key."""
    try:
        client.table(table).select("*").limit(1).execute()
    except Exception as e:
        message = str(e)
        if _is_missing_relation(message):
            logger.warning("Table missing", table=table)
            return ProbeResult(table=table, exists=False, error=message)
        logger.error("Table probe failed", table=table, error=message)
        return ProbeResult(table=table, exists=True, error=message)
    return ProbeResult(table=table, exists=True)


def probe_columns(client: Client, table: str, columns: list[str]) -> ProbeResult:
    """
    Check that columns added by a migration are present.

    A "column ... does not exist" error means the migration has not been
    applied yet; any other error is reported as-is.
    """
    cols = tuple(columns)
    try:
        client.table(table).select(", ".join(cols)).limit(1).execute()
    except Exception as e:
        message = str(e)
        if _is_missing_column(message):
            logger.warning("Columns missing", table=table, columns=list(cols))
            return ProbeResult(table=table, exists=False, columns=cols, error=message)
        if _is_missing_relation(message):
            return ProbeResult(table=table, exists=False, columns=cols, error=message)
        logger.error("Column probe failed", table=table, error=message)
        return ProbeResult(table=table, exists=True, columns=cols, error=message)
    return ProbeResult(table=table, exists=True, columns=cols)


def probe_tables(client: Client, tables: list[str]) -> list[ProbeResult]:
    return [probe_table(client, table) for table in tables]
