"""
Sequential SQL execution over RPC.

Each statement is sent on its own through the project's generic SQL
function. A failing statement is logged and recorded, then the runner
moves on to the next one: there is no transaction and no rollback.
"""

from dataclasses import dataclass, field
from pathlib import Path

import structlog
from supabase import Client

from app.migrations.sql import load_sql_file, preview
from app.numbers import round_half_up

logger = structlog.get_logger()


@dataclass
class StatementResult:
    index: int
    statement: str
    ok: bool
    error: str | None = None


@dataclass
class MigrationReport:
    name: str
    results: list[StatementResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def success_rate(self) -> int:
        """Whole-number percentage of statements that succeeded (0 when empty)."""
        if not self.results:
            return 0
        return round_half_up(self.success_count / self.total * 100)

    @property
    def ok(self) -> bool:
        return self.error_count == 0

    @property
    def failures(self) -> list[StatementResult]:
        return [r for r in self.results if not r.ok]


def manual_instructions(sql_path: str | Path | None = None) -> str:
    """Fallback steps for applying SQL when the RPC route is unavailable."""
    source = f"the contents of {Path(sql_path).name}" if sql_path else "the migration SQL"
    return "\n".join(
        [
            "Apply the SQL manually in your Supabase dashboard:",
            "1. Go to: Supabase Dashboard → SQL Editor → New query",
            f"2. Paste {source}",
            "3. Run the query",
        ]
    )


class MigrationRunner:
    """
    Runs SQL statements one by one through an RPC function.

    Args:
        client: Supabase client; DDL normally needs the service-role key
        function_name: RPC function taking a single ``sql`` argument
        terminate: Re-append ``;`` to each statement before sending
    """

    def __init__(self, client: Client, function_name: str = "exec_sql", terminate: bool = True):
        self.client = client
        self.function_name = function_name
        self.terminate = terminate

    def execute(self, statement: str) -> None:
        sql = statement + ";" if self.terminate else statement
        self.client.rpc(self.function_name, {"sql": sql}).execute()

    def run_statements(self, statements: list[str], name: str = "migration") -> MigrationReport:
        report = MigrationReport(name=name)
        total = len(statements)
        logger.info("Executing SQL statements", migration=name, total=total)

        for index, statement in enumerate(statements, start=1):
            logger.debug("Executing statement", index=index, total=total, sql=preview(statement))
            try:
                self.execute(statement)
            except Exception as e:
                # Keep going: later statements are frequently independent
                logger.error(
                    "Statement failed",
                    index=index,
                    total=total,
                    sql=preview(statement),
                    error=str(e),
                )
                report.results.append(
                    StatementResult(index=index, statement=statement, ok=False, error=str(e))
                )
                continue

            logger.info("Statement executed", index=index, total=total)
            report.results.append(StatementResult(index=index, statement=statement, ok=True))

        logger.info(
            "Migration finished",
            migration=name,
            succeeded=report.success_count,
            failed=report.error_count,
            success_rate=report.success_rate,
        )
        return report

    def run_file(self, path: str | Path) -> MigrationReport:
        script = load_sql_file(path)
        logger.info("Loaded SQL file", path=str(script.path), characters=len(script.text))
        return self.run_statements(script.statements, name=script.name)
