#!/usr/bin/env python3
"""
Recompute the realtime dashboard stats and print them.

Usage:
    python scripts/refresh_stats.py [--type commission] [--insert-test]
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
from app.db.repository import RealtimeStatsRepository
from app.log import configure_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Refresh realtime stats")
    parser.add_argument("--type", dest="stat_type", help="Only print stats of this type")
    parser.add_argument(
        "--insert-test",
        action="store_true",
        help="Insert a throwaway stat row to check that dashboards receive live updates",
    )
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)

    try:
        client = get_service_client()
    except MissingCredentialsError as e:
        print(f"❌ {e}")
        sys.exit(1)

    repo = RealtimeStatsRepository(client)
    if args.insert_test:
        stat = repo.insert_test_stat()
        print(f"✓ Inserted test stat {stat['stat_name']} = {stat['stat_value']}")

    try:
        repo.refresh()
        print("✓ Stats refreshed")
    except Exception as e:
        print(f"❌ Refresh failed: {e}")
        return

    for stat in repo.list_all(args.stat_type):
        trend = stat.get("stat_trend")
        trend_text = f" ({trend:+}%)" if isinstance(trend, (int, float)) else ""
        print(f"  {stat['stat_type']}/{stat['stat_name']}: {stat.get('stat_value')}{trend_text}")


if __name__ == "__main__":
    main()
