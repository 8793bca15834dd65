#!/usr/bin/env python3
"""
Create, update and check storage buckets.

Usage:
    python scripts/manage_buckets.py create commission-proofs
    python scripts/manage_buckets.py update commission-proofs
    python scripts/manage_buckets.py verify
    python scripts/manage_buckets.py probe-upload verification-docs
    python scripts/manage_buckets.py access commission-proofs
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
from app.storage import (
    KNOWN_BUCKETS,
    REQUIRED_BUCKETS,
    compare_access,
    ensure_bucket,
    format_size,
    probe_upload,
    update_bucket_limits,
    verify_buckets,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage Supabase storage buckets")
    parser.add_argument("--role", choices=["service", "anon"], default="service")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create buckets that do not exist yet")
    create.add_argument("buckets", nargs="*", help="Bucket names (default: all known)")

    update = sub.add_parser("update", help="Apply size limits and MIME types")
    update.add_argument("buckets", nargs="*", help="Bucket names (default: all known)")

    verify = sub.add_parser("verify", help="Check that buckets exist")
    verify.add_argument("buckets", nargs="*", help="Bucket names (default: onboarding buckets)")

    probe = sub.add_parser("probe-upload", help="Upload and remove a test object")
    probe.add_argument("bucket")

    access = sub.add_parser("access", help="Compare bucket visibility across keys")
    access.add_argument("bucket", nargs="?")

    return parser.parse_args(argv)


def _specs(names: list[str]):
    names = names or list(KNOWN_BUCKETS)
    unknown = [n for n in names if n not in KNOWN_BUCKETS]
    if unknown:
        print(f"❌ Unknown bucket(s): {', '.join(unknown)}")
        print(f"   Known: {', '.join(KNOWN_BUCKETS)}")
        sys.exit(2)
    return [KNOWN_BUCKETS[n] for n in names]


def cmd_create(client, names: list[str]) -> None:
    for spec in _specs(names):
        result = ensure_bucket(client, spec)
        if result.outcome == "created":
            print(f"✓ {spec.name} - created ({format_size(spec.file_size_limit)})")
        elif result.outcome == "already_exists":
            print(f"✓ {spec.name} - already exists")
        else:
            print(f"❌ {spec.name} - {result.error}")
            print(result.instructions)


def cmd_update(client, names: list[str]) -> None:
    for spec in _specs(names):
        result = update_bucket_limits(client, spec)
        if result.ok and result.error:
            print(f"✓ {spec.name} - updated, but could not re-read its settings: {result.error}")
        elif result.ok:
            limit = result.bucket["file_size_limit"] if result.bucket else None
            print(f"✓ {spec.name} - file size limit now {format_size(limit)}")
        else:
            print(f"❌ {spec.name} - {result.error}")
            print(f"   {result.instructions}")


def cmd_verify(client, names: list[str]) -> None:
    result = verify_buckets(client, names or REQUIRED_BUCKETS)
    if result.error:
        print(f"❌ Could not list buckets: {result.error}")
        print("   Check the storage policies, or retry with --role service")
        return
    print(f"Available buckets: {', '.join(result.available) or '(none)'}")
    for name in result.present:
        print(f"✓ {name}")
    for name in result.missing:
        print(f"❌ {name} - missing")
    if result.missing:
        print("\n⚠️  Create the missing buckets with: python scripts/manage_buckets.py create")


def cmd_probe_upload(client, bucket: str) -> None:
    probe = probe_upload(client, bucket)
    if not probe.uploaded:
        print(f"❌ Upload to {bucket} failed: {probe.error}")
        return
    print(f"✓ Uploaded {probe.path}")
    if probe.cleaned_up:
        print("✓ Test object removed")
    else:
        print(f"⚠️  Could not remove test object: {probe.error}")


def cmd_access(bucket: str | None) -> None:
    clients = {}
    for role in ("anon", "service"):
        try:
            clients[role] = get_supabase_client(role)
        except MissingCredentialsError as e:
            print(f"⚠️  Skipping {role}: {e}")
    if not clients:
        print("❌ No Supabase credentials configured")
        sys.exit(1)

    for report in compare_access(clients, bucket):
        if not report.can_see:
            print(f"❌ {report.label}: {report.error}")
            continue
        print(f"✓ {report.label}: {', '.join(report.buckets) or '(no buckets visible)'}")
        if bucket:
            state = "visible" if bucket in report.buckets else "not visible"
            print(f"   {bucket}: {state}")
            if report.objects_error:
                print(f"   ❌ cannot list objects in {bucket}: {report.objects_error}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(get_settings().log_level)

    if args.command == "access":
        cmd_access(args.bucket)
        return

    try:
        client = get_supabase_client(args.role)
    except MissingCredentialsError as e:
        print(f"❌ {e}")
        sys.exit(1)

    if args.command == "create":
        cmd_create(client, args.buckets)
    elif args.command == "update":
        cmd_update(client, args.buckets)
    elif args.command == "verify":
        cmd_verify(client, args.buckets)
    elif args.command == "probe-upload":
        cmd_probe_upload(client, args.bucket)


if __name__ == "__main__":
    main()
