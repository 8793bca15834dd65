"""
Database layer for the marketplace.

Uses Supabase as the backend for:
- PostgreSQL database (through PostgREST)
- File storage
- Generic SQL execution via the exec_sql RPC
"""

from app.db.client import (
    MissingCredentialsError,
    get_service_client,
    get_supabase_client,
    get_supabase_client_with_token,
)
from app.db.repository import (
    BookingRepository,
    CommissionPaymentRepository,
    ContentRepository,
    NotificationRepository,
    ProfileRepository,
    ProviderProfileRepository,
    RealtimeStatsRepository,
    ServiceRepository,
)

__all__ = [
    "MissingCredentialsError",
    "get_service_client",
    "get_supabase_client",
    "get_supabase_client_with_token",
    "BookingRepository",
    "CommissionPaymentRepository",
    "ContentRepository",
    "NotificationRepository",
    "ProfileRepository",
    "ProviderProfileRepository",
    "RealtimeStatsRepository",
    "ServiceRepository",
]
