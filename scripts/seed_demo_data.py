#!/usr/bin/env python3
"""
Seed demo data for the commission analytics dashboard.

Usage:
    python scripts/seed_demo_data.py [--force]
"""

import argparse
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from app.config import get_settings
from app.db.client import MissingCredentialsError, get_service_client
from app.demo import seed_demo_data
from app.log import configure_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed commission analytics demo data")
    parser.add_argument("--force", action="store_true", help="Seed even if bookings exist")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)

    try:
        client = get_service_client()
    except MissingCredentialsError as e:
        print(f"❌ {e}")
        sys.exit(1)

    result = seed_demo_data(client, force=args.force)
    if result.skipped:
        print("✓ Bookings already exist, skipping demo data (use --force to seed anyway)")
        return

    for table, count in result.inserted.items():
        print(f"✓ {table} - {count} rows")
    for table, error in result.errors.items():
        print(f"❌ {table} - {error}")

    totals = result.totals
    print("\n── Demo commission totals ──")
    print(f"Total commission: ₹{totals.total:,.0f}")
    print(f"Pending: ₹{totals.pending:,.0f}")
    print(f"Cleared: ₹{totals.cleared:,.0f}")


if __name__ == "__main__":
    main()
