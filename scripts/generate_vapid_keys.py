#!/usr/bin/env python3
"""
Generate a VAPID key pair for Web Push and print it as .env lines.

Usage:
    python scripts/generate_vapid_keys.py
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.notifications.vapid import generate_vapid_keys, is_valid_public_key


def main() -> None:
    keys = generate_vapid_keys()
    if not is_valid_public_key(keys.public_key):
        print("❌ Generated public key failed validation")
        sys.exit(1)

    print("Add these to your .env file:\n")
    print(f"VITE_VAPID_PUBLIC_KEY={keys.public_key}")
    print(f"VAPID_PRIVATE_KEY={keys.private_key}")
    print("\n⚠️  Keep the private key secret; only the public key goes to the browser.")


if __name__ == "__main__":
    main()
