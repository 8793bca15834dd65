"""
Distance filtering for the "near me" service search.

Services arrive joined with their provider profile; the provider's
coordinates, rating, job count and Pro badge feed the ranking.
"""

import math
from dataclasses import dataclass
from typing import Literal

from app.numbers import round_half_up

EARTH_RADIUS_M = 6371e3
CITY_SPEED_KMH = 30

SortKey = Literal["distance", "priority", "rating", "combined"]


@dataclass(frozen=True)
class DistanceZone:
    name: str
    max_distance: float  # meters
    color: str
    priority: int


DISTANCE_ZONES = (
    DistanceZone("Very Close", 2000, "#10b981", 10),
    DistanceZone("Close", 5000, "#f59e0b", 7),
    DistanceZone("Moderate", 10000, "#3b82f6", 5),
    DistanceZone("Far", 20000, "#8b5cf6", 2),
)
BEYOND_ZONES = "Very Far"


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters (haversine)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round_half_up(meters)}m"
    return f"{meters / 1000:.1f}km"


def zone_for(distance: float) -> str:
    for zone in DISTANCE_ZONES:
        if distance <= zone.max_distance:
            return zone.name
    return BEYOND_ZONES


def _provider(service: dict) -> dict:
    return service.get("provider_profiles") or {}


def _has_location(service: dict) -> bool:
    provider = _provider(service)
    return bool(provider.get("latitude") and provider.get("longitude"))


def priority_score(service: dict, zone_name: str, prioritize_pro_badge: bool = True) -> float:
    provider = _provider(service)
    score = 0.0
    for zone in DISTANCE_ZONES:
        if zone.name == zone_name:
            score += zone.priority
    if prioritize_pro_badge and provider.get("verified_pro"):
        score += 20
    if provider.get("rating"):
        score += provider["rating"] * 2
    if provider.get("total_jobs"):
        score += min(provider["total_jobs"] / 10, 10)
    return score


def filter_services_by_distance(
    services: list[dict],
    user_lat: float,
    user_lng: float,
    max_distance: float = 10000,
    include_travel_time: bool = False,
    prioritize_pro_badge: bool = True,
    sort_by: SortKey = "combined",
) -> list[dict]:
    """
    Services within ``max_distance`` meters, annotated and sorted.

    Each returned service is a copy with ``distance``, ``distance_zone``,
    ``travel_time`` (minutes, when requested) and ``priority_score``.
    Services whose provider has no coordinates are skipped.
    """
    results = []
    for service in services:
        if not _has_location(service):
            continue
        provider = _provider(service)
        distance = calculate_distance(user_lat, user_lng, provider["latitude"], provider["longitude"])
        if distance > max_distance:
            continue

        zone_name = zone_for(distance)
        travel_time = None
        if include_travel_time:
            travel_time = round_half_up(distance / 1000 / CITY_SPEED_KMH * 60)

        results.append(
            {
                **service,
                "distance": distance,
                "distance_zone": zone_name,
                "travel_time": travel_time,
                "priority_score": priority_score(service, zone_name, prioritize_pro_badge),
            }
        )

    if sort_by == "distance":
        results.sort(key=lambda s: s["distance"])
    elif sort_by == "priority":
        results.sort(key=lambda s: -s["priority_score"])
    elif sort_by == "rating":
        results.sort(key=lambda s: -(_provider(s).get("rating") or 0))
    else:
        results.sort(key=_combined_key)
    return results


def _combined_key(service: dict) -> tuple[float, float]:
    # Priority buckets of width 5 first, then nearest within a bucket
    return (-(service["priority_score"] // 5), service["distance"])


def services_by_zone(
    services: list[dict],
    user_lat: float,
    user_lng: float,
    zones: list[str] | None = None,
) -> dict[str, list[dict]]:
    wanted = zones or [z.name for z in DISTANCE_ZONES]
    grouped: dict[str, list[dict]] = {}
    for zone in DISTANCE_ZONES:
        if zone.name not in wanted:
            continue
        in_range = filter_services_by_distance(services, user_lat, user_lng, zone.max_distance)
        grouped[zone.name] = [s for s in in_range if s["distance_zone"] == zone.name]
    return grouped


@dataclass
class Coverage:
    recommended_radius: int
    services_in_radius: int
    coverage_percentage: int


def optimal_coverage(
    services: list[dict],
    user_lat: float,
    user_lng: float,
    target_services: int = 10,
    max_distance: int = 20000,
    step: int = 1000,
) -> Coverage:
    """Smallest radius (in 1 km steps, capped at 20 km) reaching ``target_services``."""
    located = sum(1 for s in services if _has_location(s))

    def percentage(count: int) -> int:
        return round_half_up(count / located * 100) if located else 0

    for radius in range(step, max_distance + 1, step):
        count = len(filter_services_by_distance(services, user_lat, user_lng, radius))
        if count >= target_services:
            return Coverage(radius, count, percentage(count))

    count = len(filter_services_by_distance(services, user_lat, user_lng, max_distance))
    return Coverage(max_distance, count, percentage(count))
