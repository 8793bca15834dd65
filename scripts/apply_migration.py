#!/usr/bin/env python3
"""
Apply a SQL migration file through the exec_sql RPC function.

Usage:
    python scripts/apply_migration.py migrations/add_started_at.sql
    python scripts/apply_migration.py fix.sql --role anon --verify-table bookings \
        --verify-columns started_at,cancelled_at
"""

import argparse
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from app.config import get_settings
from app.db.client import MissingCredentialsError, get_supabase_client
from app.log import configure_logging
from app.migrations import MigrationRunner, manual_instructions, probe_columns, probe_table


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply a SQL migration via RPC")
    parser.add_argument("sql_file", type=Path, help="Path to the .sql file")
    parser.add_argument(
        "--role",
        choices=["service", "anon"],
        default="service",
        help="Which key to use (DDL normally needs the service-role key)",
    )
    parser.add_argument("--verify-table", help="Table to probe after applying")
    parser.add_argument(
        "--verify-columns",
        help="Comma-separated columns expected on --verify-table",
    )
    args = parser.parse_args(argv)
    if not args.sql_file.exists():
        parser.error(f"SQL file not found: {args.sql_file}")
    return args


def verify(client, table: str, columns: str | None) -> None:
    print("\n── Verifying ──")
    if columns:
        result = probe_columns(client, table, [c.strip() for c in columns.split(",") if c.strip()])
        label = f"{table}({', '.join(result.columns)})"
    else:
        result = probe_table(client, table)
        label = table

    if result.ok:
        print(f"✓ {label} - present")
    elif not result.exists:
        print(f"❌ {label} - missing, migration may not have been applied")
    else:
        print(f"⚠️  {label} - could not verify: {result.error}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        client = get_supabase_client(args.role)
    except MissingCredentialsError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print("=" * 50)
    print(f"APPLYING {args.sql_file.name}")
    print("=" * 50)

    runner = MigrationRunner(client, function_name=settings.exec_sql_function)
    report = runner.run_file(args.sql_file)

    print("\n── Summary ──")
    print(f"✓ Successful: {report.success_count}")
    print(f"❌ Errors: {report.error_count}")
    print(f"Success rate: {report.success_rate}%")

    for failure in report.failures:
        print(f"  [{failure.index}] {failure.error}")

    if args.verify_table:
        verify(client, args.verify_table, args.verify_columns)

    if not report.ok:
        print()
        print(manual_instructions(args.sql_file))


if __name__ == "__main__":
    main()
