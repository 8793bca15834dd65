"""
Booking status lifecycle.

The database enforces the lifecycle with triggers; this mirrors it so
scripts only issue updates the triggers will accept.
"""

from datetime import datetime, timezone

from app.db.models import BookingStatus

TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# Timestamp column stamped when a booking enters the status
STATUS_TIMESTAMPS = {
    BookingStatus.IN_PROGRESS: "started_at",
    BookingStatus.COMPLETED: "completed_at",
    BookingStatus.CANCELLED: "cancelled_at",
}


class InvalidTransitionError(ValueError):
    pass


def can_transition(current: BookingStatus | str, target: BookingStatus | str) -> bool:
    return BookingStatus(target) in TRANSITIONS[BookingStatus(current)]


def is_terminal(status: BookingStatus | str) -> bool:
    return not TRANSITIONS[BookingStatus(status)]


def transition_payload(
    current: BookingStatus | str,
    target: BookingStatus | str,
    now: datetime | None = None,
    **extra,
) -> dict:
    """
    Build the row update for moving a booking to ``target``.

    Raises:
        InvalidTransitionError: If the lifecycle does not allow the move
    """
    current, target = BookingStatus(current), BookingStatus(target)
    if not can_transition(current, target):
        raise InvalidTransitionError(f"Cannot move booking from {current.value} to {target.value}")

    payload = {"status": target.value, **extra}
    column = STATUS_TIMESTAMPS.get(target)
    if column:
        payload[column] = (now or datetime.now(timezone.utc)).isoformat()
    return payload
