"""
Commission read-side calculations.

Providers owe a 5% commission and are reminded every five completed jobs.
The counter (``completed_jobs_since_commission``) is maintained by a
database trigger and reset when an admin approves a payment; the figures
computed here are for display in the admin overview only.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

COMMISSION_CYCLE_JOBS = 5
COMMISSION_RATE = 0.05
RECENT_PAYMENT_DAYS = 30


@dataclass
class CycleStatus:
    jobs_in_cycle: int
    jobs_remaining: int
    reminder_due: bool


def cycle_status(completed_jobs_since_commission: int | None) -> CycleStatus:
    jobs = max(completed_jobs_since_commission or 0, 0)
    return CycleStatus(
        jobs_in_cycle=jobs,
        jobs_remaining=max(COMMISSION_CYCLE_JOBS - jobs, 0),
        reminder_due=jobs >= COMMISSION_CYCLE_JOBS,
    )


def commission_for(earnings: float) -> float:
    return round(earnings * COMMISSION_RATE, 2)


def _parse_ts(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    # PostgREST timestamps: "2025-01-28T10:00:00+00:00" or with a trailing Z
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class ProviderCommissionSummary:
    provider_id: str
    total_jobs: int
    total_earnings: float
    total_commission: float
    one_week_earnings: float
    one_week_commission: float
    one_month_earnings: float
    one_month_commission: float
    completed_jobs_since_commission: int
    current_cycle_commission: float
    reminder_due: bool
    has_approved_payment: bool
    latest_approved_payment_date: str | None

    def to_dict(self) -> dict:
        return asdict(self)


def summarize_provider(
    provider: dict,
    completed_bookings: list[dict],
    latest_approved_payment: dict | None = None,
    now: datetime | None = None,
) -> ProviderCommissionSummary:
    """
    Summarize earnings and the commission cycle for one provider.

    The stored cycle counter is trusted only when an approved payment was
    reviewed in the last 30 days; otherwise the cycle position is derived
    from the completed job count.
    """
    now = now or datetime.now(timezone.utc)
    one_week_ago = now - timedelta(days=7)
    one_month_ago = now - timedelta(days=30)

    total_earnings = 0.0
    week_earnings = 0.0
    month_earnings = 0.0
    total_jobs = 0

    for booking in completed_bookings:
        if booking.get("status", "completed") != "completed":
            continue
        earnings = float(booking.get("final_price") or 0)
        total_earnings += earnings
        total_jobs += 1

        completed_at = _parse_ts(booking.get("completed_at"))
        if completed_at is None:
            continue
        if completed_at >= one_week_ago:
            week_earnings += earnings
        if completed_at >= one_month_ago:
            month_earnings += earnings

    latest_date = None
    if latest_approved_payment:
        latest_date = latest_approved_payment.get("reviewed_at") or latest_approved_payment.get(
            "submitted_at"
        )

    paid_at = _parse_ts(latest_date)
    if paid_at is not None and now - paid_at <= timedelta(days=RECENT_PAYMENT_DAYS):
        cycle_jobs = int(provider.get("completed_jobs_since_commission") or 0)
    else:
        cycle_jobs = total_jobs % COMMISSION_CYCLE_JOBS

    average_job = total_earnings / total_jobs if total_jobs else 0.0

    return ProviderCommissionSummary(
        provider_id=str(provider.get("user_id") or provider.get("id")),
        total_jobs=total_jobs,
        total_earnings=total_earnings,
        total_commission=commission_for(total_earnings),
        one_week_earnings=week_earnings,
        one_week_commission=commission_for(week_earnings),
        one_month_earnings=month_earnings,
        one_month_commission=commission_for(month_earnings),
        completed_jobs_since_commission=cycle_jobs,
        current_cycle_commission=commission_for(cycle_jobs * average_job),
        reminder_due=cycle_status(cycle_jobs).reminder_due,
        has_approved_payment=latest_approved_payment is not None,
        latest_approved_payment_date=str(latest_date) if latest_date else None,
    )


@dataclass
class TrackingTotals:
    total: float = 0
    pending: float = 0
    cleared: float = 0
    records: int = 0


def summarize_tracking(records: list[dict]) -> TrackingTotals:
    """Totals over commission_tracking rows by status."""
    totals = TrackingTotals()
    for record in records:
        amount = float(record.get("commission_amount") or 0)
        totals.total += amount
        totals.records += 1
        if record.get("status") == "pending":
            totals.pending += amount
        elif record.get("status") == "cleared":
            totals.cleared += amount
    return totals
