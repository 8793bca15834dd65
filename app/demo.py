"""
Demo data for the commission analytics screens.

IDs are stable UUIDs derived from readable names, so re-running the
seeder upserts the same rows instead of piling up copies.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import NAMESPACE_URL, uuid5

import structlog
from supabase import Client

from app.domain.commission import TrackingTotals, summarize_tracking

logger = structlog.get_logger()

_NAMESPACE = uuid5(NAMESPACE_URL, "marketplace-demo")


def demo_id(name: str) -> str:
    return str(uuid5(_NAMESPACE, name))


# (name, verified, verified_pro, total_jobs, total_earnings)
_PROVIDERS = [
    ("demo-provider-1", True, True, 15, 45000),
    ("demo-provider-2", True, False, 8, 24000),
    ("demo-provider-3", True, True, 22, 66000),
    ("demo-provider-4", False, False, 3, 9000),
]

# (booking, provider, final_price, days_ago_created, tracking_status)
_BOOKINGS = [
    ("demo-booking-1", "demo-provider-1", 3000, 30, "cleared"),
    ("demo-booking-2", "demo-provider-1", 5000, 25, "cleared"),
    ("demo-booking-3", "demo-provider-2", 4000, 20, "pending"),
    ("demo-booking-4", "demo-provider-3", 8000, 15, "cleared"),
    ("demo-booking-5", "demo-provider-3", 6000, 10, "cleared"),
    ("demo-booking-6", "demo-provider-1", 3500, 5, "pending"),
    ("demo-booking-7", "demo-provider-2", 2800, 2, "cleared"),
]

# Demo analytics assume a 10% commission on each booking
DEMO_COMMISSION_RATE = 0.10


def build_demo_data(now: datetime | None = None) -> dict[str, list[dict]]:
    """Rows for provider_profiles, bookings and commission_tracking."""
    now = now or datetime.now(timezone.utc)

    def days_ago(days: int) -> str:
        return (now - timedelta(days=days)).isoformat()

    providers = [
        {
            "user_id": demo_id(name),
            "business_name": name.replace("-", " ").title(),
            "verified": verified,
            "admin_approved": True,
            "verified_pro": pro,
            "total_jobs": jobs,
            "total_earnings": earnings,
            "total_commission": earnings * DEMO_COMMISSION_RATE,
        }
        for name, verified, pro, jobs, earnings in _PROVIDERS
    ]

    bookings = []
    tracking = []
    for index, (booking, provider, price, created, status) in enumerate(_BOOKINGS, start=1):
        commission = price * DEMO_COMMISSION_RATE
        bookings.append(
            {
                "id": demo_id(booking),
                "provider_id": demo_id(provider),
                "customer_id": demo_id(f"demo-customer-{index}"),
                "service_id": demo_id(f"demo-service-{index}"),
                "status": "completed",
                "final_price": price,
                "commission_amount": commission,
                "created_at": days_ago(created),
                "completed_at": days_ago(created - 1),
            }
        )
        tracking.append(
            {
                "id": demo_id(f"demo-commission-{index}"),
                "provider_id": demo_id(provider),
                "booking_id": demo_id(booking),
                "commission_amount": commission,
                "status": status,
                "created_at": days_ago(created - 1),
            }
        )

    return {
        "provider_profiles": providers,
        "bookings": bookings,
        "commission_tracking": tracking,
    }


@dataclass
class SeedResult:
    skipped: bool = False
    inserted: dict[str, int] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    totals: TrackingTotals | None = None


def seed_demo_data(client: Client, now: datetime | None = None, force: bool = False) -> SeedResult:
    """
    Upsert demo rows table by table.

    Skips entirely when bookings already exist (unless ``force``). A failing
    table is logged and the remaining tables are still attempted.
    """
    if not force:
        existing = client.table("bookings").select("id").limit(1).execute()
        if existing.data:
            logger.info("Bookings already present, skipping demo data")
            return SeedResult(skipped=True)

    data = build_demo_data(now)
    result = SeedResult()
    for table, rows in data.items():
        try:
            client.table(table).upsert(rows).execute()
        except Exception as e:
            logger.error("Demo data insert failed", table=table, error=str(e))
            result.errors[table] = str(e)
            continue
        logger.info("Inserted demo rows", table=table, count=len(rows))
        result.inserted[table] = len(rows)

    result.totals = summarize_tracking(data["commission_tracking"])
    return result
