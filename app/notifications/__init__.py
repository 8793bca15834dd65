"""Push notification helpers."""

from app.notifications.vapid import (
    VapidKeys,
    generate_vapid_keys,
    is_valid_public_key,
    vapid_authorization,
)

__all__ = [
    "VapidKeys",
    "generate_vapid_keys",
    "is_valid_public_key",
    "vapid_authorization",
]
