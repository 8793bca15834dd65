"""
API routes for the "near me" service search.
"""

from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

from app.api.deps import get_db
from app.db.repository import ServiceRepository
from app.domain.categories import get_category
from app.domain.distance import (
    filter_services_by_distance,
    format_distance,
    optimal_coverage,
    services_by_zone,
)

router = APIRouter(prefix="/api/services", tags=["services"])


def _active_services(db: Client, category: str | None) -> list[dict]:
    services = ServiceRepository(db).list_active_with_providers()
    if category is None:
        return services
    if get_category(category) is None:
        raise HTTPException(status_code=404, detail=f"Unknown category: {category}")
    return [s for s in services if s.get("category") == category]


@router.get("/nearby")
async def nearby_services(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(10000, gt=0, le=50000, description="meters"),
    sort: Literal["distance", "priority", "rating", "combined"] = "combined",
    travel_time: bool = False,
    category: str | None = None,
    db: Client = Depends(get_db),
) -> dict[str, Any]:
    services = _active_services(db, category)
    matches = filter_services_by_distance(
        services,
        lat,
        lng,
        max_distance=radius,
        include_travel_time=travel_time,
        sort_by=sort,
    )
    for service in matches:
        service["distance_label"] = format_distance(service["distance"])

    coverage = optimal_coverage(services, lat, lng)
    return {
        "count": len(matches),
        "services": matches,
        "recommended_radius": coverage.recommended_radius,
    }


@router.get("/zones")
async def services_grouped_by_zone(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    category: str | None = None,
    db: Client = Depends(get_db),
) -> dict[str, list[dict[str, Any]]]:
    """Services bucketed into distance zones, nearest zone first."""
    return services_by_zone(_active_services(db, category), lat, lng)
