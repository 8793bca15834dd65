"""
Admin API routes for provider commission and reliability overviews.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.api.deps import get_admin_db
from app.db.models import BookingStatus, ProviderProfile
from app.db.repository import (
    BookingRepository,
    CommissionPaymentRepository,
    ProfileRepository,
    ProviderProfileRepository,
)
from app.domain.commission import summarize_provider
from app.domain.reliability import flagged_users

logger = structlog.get_logger()

router = APIRouter(prefix="/api/providers", tags=["providers"])


@router.get("/commission-due", response_model=list[ProviderProfile])
async def providers_commission_due(
    due: bool = True,
    db: Client = Depends(get_admin_db),
) -> list[dict[str, Any]]:
    """Providers at (or below) the five-job commission threshold."""
    return ProviderProfileRepository(db).list_by_commission_due(due)


@router.get("/{provider_id}/commission")
async def provider_commission(
    provider_id: str,
    db: Client = Depends(get_admin_db),
) -> dict[str, Any]:
    provider = ProviderProfileRepository(db).get(provider_id)
    if not provider:
        raise HTTPException(status_code=404, detail="Provider not found")

    bookings = BookingRepository(db).list_by_provider(provider_id, BookingStatus.COMPLETED)
    latest = CommissionPaymentRepository(db).latest_approved(provider_id)

    summary = summarize_provider(provider, bookings, latest)
    logger.info(
        "Computed provider commission",
        provider_id=provider_id,
        total_jobs=summary.total_jobs,
        reminder_due=summary.reminder_due,
    )
    return summary.to_dict()


@router.get("/reliability")
async def reliability_overview(db: Client = Depends(get_admin_db)) -> list[dict[str, Any]]:
    """Users with no-show strikes, most recent first."""
    rows = ProfileRepository(db).list_with_strikes()
    return [
        {
            "user_id": record.user_id,
            "full_name": record.full_name,
            "no_show_strikes_count": record.strikes,
            "last_strike_date": record.last_strike_date,
            "is_suspended": record.is_suspended,
            "at_risk": record.at_risk,
        }
        for record in flagged_users(rows)
    ]
