"""
API routes for the realtime statistics widgets.

Stats rows are computed by the ``refresh_realtime_stats`` database
function. Reads are public; forcing a refresh is admin-only and notifies
connected dashboards so they re-query.
"""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.api.deps import get_admin_db, get_db
from app.api.routes.events import publish_event
from app.db.models import RealtimeStat
from app.db.repository import CommissionTrackingRepository, RealtimeStatsRepository
from app.domain.commission import summarize_tracking

logger = structlog.get_logger()

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=list[RealtimeStat])
async def list_stats(
    stat_type: str | None = None,
    db: Client = Depends(get_db),
) -> list[dict[str, Any]]:
    """All realtime stats, optionally filtered by type (users, bookings, commission...)."""
    return RealtimeStatsRepository(db).list_all(stat_type)


@router.get("/commission", response_model=RealtimeStat)
async def commission_stats(db: Client = Depends(get_db)) -> dict[str, Any]:
    """The platform-wide total commission stat."""
    stat = RealtimeStatsRepository(db).get("commission", "total_commission")
    if not stat:
        raise HTTPException(status_code=404, detail="Commission stats not available")
    return stat


@router.get("/commission/tracking")
async def commission_tracking(db: Client = Depends(get_admin_db)) -> dict[str, Any]:
    """Totals over commission_tracking rows, split into pending and cleared."""
    totals = summarize_tracking(CommissionTrackingRepository(db).list_all())
    return asdict(totals)


@router.post("/refresh")
async def refresh_stats(db: Client = Depends(get_admin_db)) -> dict[str, Any]:
    """Recompute stats in the database and tell dashboards to reload."""
    try:
        RealtimeStatsRepository(db).refresh()
    except Exception as e:
        logger.error("Stats refresh failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Stats refresh failed: {e}")

    refreshed_at = datetime.now(timezone.utc).isoformat()
    delivered = await publish_event("stats_refreshed", {"refreshed_at": refreshed_at})
    logger.info("Stats refresh published", subscribers=delivered)

    return {"success": True, "refreshed_at": refreshed_at, "notified": delivered}
