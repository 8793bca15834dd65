"""
Repository layer for database operations.

Thin wrappers over the marketplace tables. Business rules (commission
counters, strike suspensions, service reactivation) run as database
triggers; these helpers only read rows and write the columns the scripts
and API need.
"""

import random
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import structlog
from supabase import Client

from app.db.client import get_supabase_client, get_supabase_client_with_token
from app.db.models import BookingStatus, CommissionPayment, CommissionPaymentStatus

logger = structlog.get_logger()


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _first(result) -> dict | None:
    return result.data[0] if result.data else None


class BaseRepository:
    """Base repository with common operations."""

    table_name: str = ""

    def __init__(self, client: Client | None = None, access_token: str | None = None):
        if client is not None:
            self.client = client
        elif access_token:
            self.client = get_supabase_client_with_token(access_token)
        else:
            self.client = get_supabase_client()

    def _table(self):
        return self.client.table(self.table_name)


class BookingRepository(BaseRepository):
    """Repository for bookings table."""

    table_name = "bookings"

    def get(self, booking_id: str | UUID) -> dict | None:
        result = self._table().select("*").eq("id", str(booking_id)).execute()
        return _first(result)

    def create(self, **fields) -> dict:
        result = self._table().insert(fields).execute()
        booking = result.data[0]
        logger.info("Created booking", booking_id=booking.get("id"), status=booking.get("status"))
        return booking

    def list_by_provider(
        self, provider_id: str | UUID, status: BookingStatus | str | None = None
    ) -> list[dict]:
        """List a provider's bookings, optionally filtered by status."""
        query = self._table().select("*").eq("provider_id", str(provider_id))
        if status:
            query = query.eq("status", BookingStatus(status).value)
        return query.execute().data

    def first_with_status(self, status: BookingStatus | str) -> dict | None:
        result = (
            self._table()
            .select("id, status")
            .eq("status", BookingStatus(status).value)
            .limit(1)
            .execute()
        )
        return _first(result)

    def update(self, booking_id: str | UUID, **fields) -> dict | None:
        result = self._table().update(fields).eq("id", str(booking_id)).execute()
        return _first(result)

    def delete_test_bookings(self, provider_id: str | UUID, title_prefix: str) -> None:
        """Remove bookings created by a manual check (matched by title prefix)."""
        (
            self._table()
            .delete()
            .eq("provider_id", str(provider_id))
            .like("title", f"{title_prefix}%")
            .execute()
        )


class ProviderProfileRepository(BaseRepository):
    """Repository for provider_profiles table."""

    table_name = "provider_profiles"

    def get(self, user_id: str | UUID) -> dict | None:
        result = self._table().select("*").eq("user_id", str(user_id)).execute()
        return _first(result)

    def list_approved(self, limit: int = 5) -> list[dict]:
        result = self._table().select("*").eq("admin_approved", True).limit(limit).execute()
        return result.data

    def list_by_commission_due(self, due: bool, cycle_jobs: int = 5) -> list[dict]:
        """Providers whose cycle counter has (or has not) reached the commission threshold."""
        query = self._table().select("*")
        if due:
            query = query.gte("completed_jobs_since_commission", cycle_jobs)
        else:
            query = query.lt("completed_jobs_since_commission", cycle_jobs)
        return query.order("completed_jobs_since_commission", desc=True).execute().data


class ServiceRepository(BaseRepository):
    """Repository for services table."""

    table_name = "services"

    def list_active_with_providers(self, limit: int = 500) -> list[dict]:
        """Active services joined with their provider profile (location, rating, badge)."""
        result = (
            self._table()
            .select("*, provider_profiles(*)")
            .eq("is_active", True)
            .limit(limit)
            .execute()
        )
        return result.data

    def list_by_provider(self, provider_id: str | UUID) -> list[dict]:
        result = (
            self._table()
            .select("id, title, is_active")
            .eq("provider_id", str(provider_id))
            .execute()
        )
        return result.data


class CommissionPaymentRepository(BaseRepository):
    """Repository for commission_payments table."""

    table_name = "commission_payments"

    def submit(self, payment: CommissionPayment) -> dict:
        data = payment.model_dump(mode="json", exclude_none=True)
        data.setdefault("submitted_at", _utcnow())
        result = self._table().insert(data).execute()
        logger.info(
            "Submitted commission payment",
            payment_id=result.data[0].get("id"),
            provider_id=payment.provider_id,
            amount=payment.amount,
        )
        return result.data[0]

    def review(self, payment_id: str | UUID, status: CommissionPaymentStatus) -> dict | None:
        result = (
            self._table()
            .update({"status": status.value, "reviewed_at": _utcnow()})
            .eq("id", str(payment_id))
            .execute()
        )
        return _first(result)

    def approve(self, payment_id: str | UUID) -> dict | None:
        return self.review(payment_id, CommissionPaymentStatus.APPROVED)

    def latest_approved(self, provider_id: str | UUID) -> dict | None:
        result = (
            self._table()
            .select("submitted_at, reviewed_at, status")
            .eq("provider_id", str(provider_id))
            .eq("status", CommissionPaymentStatus.APPROVED.value)
            .order("submitted_at", desc=True)
            .limit(1)
            .execute()
        )
        return _first(result)

    def delete(self, payment_id: str | UUID) -> None:
        self._table().delete().eq("id", str(payment_id)).execute()


class CommissionTrackingRepository(BaseRepository):
    """Repository for commission_tracking table."""

    table_name = "commission_tracking"

    def list_all(self, limit: int = 1000) -> list[dict]:
        return self._table().select("*").limit(limit).execute().data


class PaymentMethodRepository(BaseRepository):
    """Repository for payment_methods table."""

    table_name = "payment_methods"

    def list_active(self) -> list[dict]:
        """Only active methods are offered to providers."""
        result = self._table().select("*").eq("is_active", True).order("name").execute()
        return result.data


class ProBadgeRequestRepository(BaseRepository):
    """Repository for pro_badge_requests table."""

    table_name = "pro_badge_requests"

    def create(self, provider_id: str | UUID, request_message: str | None = None) -> dict:
        data = {
            "provider_id": str(provider_id),
            "status": "pending",
            "requested_at": _utcnow(),
        }
        if request_message:
            data["request_message"] = request_message
        result = self._table().insert(data).execute()
        return result.data[0]

    def list_pending(self) -> list[dict]:
        result = (
            self._table()
            .select("*")
            .eq("status", "pending")
            .order("requested_at", desc=True)
            .execute()
        )
        return result.data

    def delete(self, request_id: str | UUID) -> None:
        self._table().delete().eq("id", str(request_id)).execute()


# Content kinds exposed by the content management screens
CONTENT_TABLES = {
    "sections": "content_sections",
    "contact": "contact_information",
    "faqs": "faqs",
    "policies": "policies",
}


class ContentRepository(BaseRepository):
    """Repository for the content management tables."""

    table_name = "content_sections"

    def fetch(self, kind: str = "sections") -> list[dict]:
        if kind not in CONTENT_TABLES:
            raise KeyError(kind)
        return self.client.table(CONTENT_TABLES[kind]).select("*").execute().data

    def upsert_section(
        self, section_key: str, title: str, content: str, content_type: str = "text"
    ) -> dict:
        data = {
            "section_key": section_key,
            "title": title,
            "content": content,
            "content_type": content_type,
        }
        result = self._table().upsert(data, on_conflict="section_key").execute()
        return result.data[0]

    def delete_section(self, section_key: str) -> None:
        self._table().delete().eq("section_key", section_key).execute()


class RealtimeStatsRepository(BaseRepository):
    """Repository for realtime_stats table and its refresh function."""

    table_name = "realtime_stats"
    refresh_function = "refresh_realtime_stats"

    def list_all(self, stat_type: str | None = None) -> list[dict]:
        query = self._table().select("*")
        if stat_type:
            query = query.eq("stat_type", stat_type)
        return query.execute().data

    def get(self, stat_type: str, stat_name: str) -> dict | None:
        result = (
            self._table()
            .select("*")
            .eq("stat_type", stat_type)
            .eq("stat_name", stat_name)
            .limit(1)
            .execute()
        )
        return _first(result)

    def refresh(self) -> Any:
        """Ask the database to recompute the stats rows."""
        result = self.client.rpc(self.refresh_function, {}).execute()
        logger.info("Refreshed realtime stats")
        return result.data

    def insert_test_stat(self) -> dict:
        """Insert a throwaway stat row; subscribers should see it arrive."""
        data = {
            "stat_type": "test",
            "stat_name": "test_stat",
            "stat_value": random.randint(0, 99),
            "stat_trend": round(random.uniform(-5, 5), 2),
            "time_period": "current",
        }
        result = self._table().insert(data).execute()
        return result.data[0]


class NotificationRepository(BaseRepository):
    """Repository for notifications table."""

    table_name = "notifications"

    def list_for_user(
        self, user_id: str | UUID, limit: int = 20, unread_only: bool = False
    ) -> list[dict]:
        query = self._table().select("*").eq("user_id", str(user_id))
        if unread_only:
            query = query.eq("read", False)
        return query.order("created_at", desc=True).limit(limit).execute().data

    def mark_read(self, notification_id: str | UUID) -> dict | None:
        result = self._table().update({"read": True}).eq("id", str(notification_id)).execute()
        return _first(result)


class ProfileRepository(BaseRepository):
    """Repository for profiles table (user type, strikes, suspension)."""

    table_name = "profiles"

    def get(self, user_id: str | UUID) -> dict | None:
        result = self._table().select("*").eq("user_id", str(user_id)).execute()
        return _first(result)

    def is_admin(self, user_id: str | UUID) -> bool:
        profile = self.get(user_id)
        return bool(profile and profile.get("user_type") == "admin")

    def list_with_strikes(self) -> list[dict]:
        result = (
            self._table()
            .select("user_id, full_name, no_show_strikes_count, last_strike_date, is_suspended")
            .gt("no_show_strikes_count", 0)
            .order("last_strike_date", desc=True)
            .execute()
        )
        return result.data
