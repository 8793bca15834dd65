"""
Read-side business rules: booking lifecycle, commission cycle,
no-show strikes and the distance search.

Run with:
    python -m pytest tests/test_domain.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.db.models import BookingStatus
from app.domain.bookings import (
    InvalidTransitionError,
    can_transition,
    is_terminal,
    transition_payload,
)
from app.domain.categories import SERVICE_CATEGORIES, get_category
from app.domain.commission import (
    COMMISSION_CYCLE_JOBS,
    commission_for,
    cycle_status,
    summarize_provider,
    summarize_tracking,
)
from app.domain.distance import (
    calculate_distance,
    filter_services_by_distance,
    format_distance,
    optimal_coverage,
    services_by_zone,
    zone_for,
)
from app.domain.reliability import SUSPENSION_STRIKES, ReliabilityRecord, flagged_users

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


# ===================================================================
# TestBookingLifecycle
# ===================================================================


class TestBookingLifecycle:
    def test_forward_path(self):
        assert can_transition("pending", "confirmed")
        assert can_transition("confirmed", "in_progress")
        assert can_transition("in_progress", "completed")

    def test_no_skipping(self):
        assert not can_transition("pending", "in_progress")
        assert not can_transition("confirmed", "completed")

    def test_terminal_states(self):
        assert is_terminal(BookingStatus.COMPLETED)
        assert is_terminal(BookingStatus.CANCELLED)
        assert not is_terminal(BookingStatus.IN_PROGRESS)

    def test_start_stamps_started_at(self):
        payload = transition_payload("confirmed", "in_progress", now=NOW)
        assert payload == {"status": "in_progress", "started_at": NOW.isoformat()}

    def test_cancel_carries_reason(self):
        payload = transition_payload(
            "pending", "cancelled", now=NOW, cancellation_reason="no_show", cancelled_by="provider"
        )
        assert payload["cancelled_at"] == NOW.isoformat()
        assert payload["cancellation_reason"] == "no_show"

    def test_confirm_has_no_timestamp(self):
        assert transition_payload("pending", "confirmed") == {"status": "confirmed"}

    def test_invalid_transition_raises(self):
        with pytest.raises(InvalidTransitionError):
            transition_payload("completed", "in_progress")

    def test_unknown_status_raises(self):
        with pytest.raises(ValueError):
            can_transition("pending", "archived")


# ===================================================================
# TestCommission
# ===================================================================


def _bookings(count: int, price: float = 1000, days_ago: int = 3) -> list[dict]:
    return [
        {
            "id": f"b{i}",
            "status": "completed",
            "final_price": price,
            "completed_at": (NOW - timedelta(days=days_ago)).isoformat(),
        }
        for i in range(count)
    ]


class TestCommission:
    def test_rate(self):
        assert commission_for(1000) == 50.0
        assert commission_for(0) == 0

    def test_cycle_status(self):
        assert cycle_status(3).jobs_remaining == 2
        assert not cycle_status(4).reminder_due
        assert cycle_status(COMMISSION_CYCLE_JOBS).reminder_due
        assert cycle_status(None).jobs_in_cycle == 0

    def test_cycle_derived_without_recent_payment(self):
        provider = {"user_id": "p1", "completed_jobs_since_commission": 0}
        summary = summarize_provider(provider, _bookings(7), now=NOW)

        assert summary.total_jobs == 7
        assert summary.completed_jobs_since_commission == 2
        assert summary.total_commission == 350.0
        assert not summary.has_approved_payment

    def test_stored_counter_used_after_recent_payment(self):
        provider = {"user_id": "p1", "completed_jobs_since_commission": 5}
        payment = {"status": "approved", "reviewed_at": (NOW - timedelta(days=10)).isoformat()}

        summary = summarize_provider(provider, _bookings(10), payment, now=NOW)

        assert summary.completed_jobs_since_commission == 5
        assert summary.reminder_due
        assert summary.current_cycle_commission == 250.0

    def test_stale_payment_falls_back_to_job_count(self):
        provider = {"user_id": "p1", "completed_jobs_since_commission": 4}
        payment = {"status": "approved", "reviewed_at": (NOW - timedelta(days=45)).isoformat()}

        summary = summarize_provider(provider, _bookings(6), payment, now=NOW)

        assert summary.completed_jobs_since_commission == 1
        assert summary.has_approved_payment

    def test_earnings_windows(self):
        bookings = _bookings(2, days_ago=3) + _bookings(1, days_ago=20) + _bookings(1, days_ago=90)
        summary = summarize_provider({"user_id": "p1"}, bookings, now=NOW)

        assert summary.one_week_earnings == 2000
        assert summary.one_month_earnings == 3000
        assert summary.total_earnings == 4000

    def test_ignores_non_completed(self):
        bookings = _bookings(2) + [{"status": "cancelled", "final_price": 999}]
        assert summarize_provider({"user_id": "p1"}, bookings, now=NOW).total_jobs == 2

    def test_tracking_totals(self):
        totals = summarize_tracking(
            [
                {"commission_amount": 100, "status": "pending"},
                {"commission_amount": 250, "status": "cleared"},
                {"commission_amount": "50", "status": "cleared"},
            ]
        )
        assert totals.total == 400
        assert totals.pending == 100
        assert totals.cleared == 300
        assert totals.records == 3


# ===================================================================
# TestReliability
# ===================================================================


class TestReliability:
    def test_strike_threshold_suspends(self):
        record = ReliabilityRecord.from_row({"user_id": "u1", "no_show_strikes_count": SUSPENSION_STRIKES})
        assert record.is_suspended
        assert not record.at_risk

    def test_one_below_threshold_is_at_risk(self):
        record = ReliabilityRecord.from_row({"user_id": "u1", "no_show_strikes_count": 2})
        assert record.at_risk
        assert not record.is_suspended

    def test_suspended_flag_wins(self):
        record = ReliabilityRecord.from_row(
            {"user_id": "u1", "no_show_strikes_count": 1, "is_suspended": True}
        )
        assert record.is_suspended

    def test_flagged_users_order(self):
        rows = [
            {"user_id": "a", "no_show_strikes_count": 1, "last_strike_date": "2025-01-01T00:00:00+00:00"},
            {"user_id": "b", "no_show_strikes_count": 0},
            {"user_id": "c", "no_show_strikes_count": 2, "last_strike_date": "2025-02-01T00:00:00+00:00"},
            {"user_id": "d", "no_show_strikes_count": 1},
        ]
        assert [r.user_id for r in flagged_users(rows)] == ["c", "a", "d"]


# ===================================================================
# TestDistance
# ===================================================================


def _service(service_id, lat_offset, **provider):
    profile = dict(provider)
    if lat_offset is not None:
        profile.update(latitude=12.97 + lat_offset, longitude=77.59)
    return {"id": service_id, "title": service_id, "provider_profiles": profile}


@pytest.fixture
def services():
    return [
        _service("near", 0.01, rating=4),
        _service("pro", 0.04, verified_pro=True),
        _service("far", 0.2, rating=5),
        _service("unlocated", None, rating=5),
    ]


class TestDistance:
    def test_one_degree_of_longitude_at_equator(self):
        assert calculate_distance(0, 0, 0, 1) == pytest.approx(111195, rel=1e-3)

    def test_format_distance(self):
        assert format_distance(850) == "850m"
        assert format_distance(1500) == "1.5km"

    def test_format_distance_rounds_halves_up(self):
        assert format_distance(2.5) == "3m"
        assert format_distance(0.5) == "1m"
        assert format_distance(998.5) == "999m"

    def test_zones(self):
        assert zone_for(1500) == "Very Close"
        assert zone_for(2000) == "Very Close"
        assert zone_for(7000) == "Moderate"
        assert zone_for(25000) == "Very Far"

    def test_filters_by_radius_and_location(self, services):
        results = filter_services_by_distance(services, 12.97, 77.59, max_distance=10000)
        assert {s["id"] for s in results} == {"near", "pro"}

    def test_annotations(self, services):
        near = filter_services_by_distance(
            services, 12.97, 77.59, include_travel_time=True, sort_by="distance"
        )[0]
        assert near["distance_zone"] == "Very Close"
        assert near["travel_time"] == 2
        assert near["priority_score"] == 18

    def test_sort_orders(self, services):
        def ids(sort_by):
            return [s["id"] for s in filter_services_by_distance(services, 12.97, 77.59, sort_by=sort_by)]

        assert ids("distance") == ["near", "pro"]
        assert ids("priority") == ["pro", "near"]
        assert ids("rating") == ["near", "pro"]
        assert ids("combined") == ["pro", "near"]

    def test_pro_badge_can_be_ignored(self, services):
        results = filter_services_by_distance(
            services, 12.97, 77.59, prioritize_pro_badge=False, sort_by="priority"
        )
        assert results[0]["id"] == "near"

    def test_does_not_mutate_input(self, services):
        filter_services_by_distance(services, 12.97, 77.59)
        assert "distance" not in services[0]

    def test_services_by_zone(self, services):
        grouped = services_by_zone(services, 12.97, 77.59)
        assert [s["id"] for s in grouped["Very Close"]] == ["near"]
        assert [s["id"] for s in grouped["Close"]] == ["pro"]
        assert grouped["Moderate"] == []

    def test_optimal_coverage(self, services):
        coverage = optimal_coverage(services, 12.97, 77.59, target_services=1)
        assert coverage.recommended_radius == 2000
        assert coverage.services_in_radius == 1
        assert coverage.coverage_percentage == 33

    def test_optimal_coverage_caps_radius(self, services):
        coverage = optimal_coverage(services, 12.97, 77.59, target_services=10)
        assert coverage.recommended_radius == 20000
        assert coverage.services_in_radius == 2

    def test_coverage_percentage_rounds_halves_up(self):
        located = [_service("near", 0.01)] + [_service(f"far{i}", 0.5) for i in range(7)]
        coverage = optimal_coverage(located, 12.97, 77.59, target_services=10)
        assert coverage.services_in_radius == 1
        assert coverage.coverage_percentage == 13


class TestCategories:
    def test_lookup(self):
        assert len(SERVICE_CATEGORIES) == 12
        assert get_category("pet_care").name == "Pet Care"
        assert get_category("unknown") is None
