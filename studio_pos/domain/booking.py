"""Slot availability and booking status transitions.

Slots are compared by their start label only. The catalog slots are
consecutive and never overlap, so an equal start is the only way two
bookings can collide.
"""

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable

from studio_pos.domain.catalog import TimeSlot
from studio_pos.domain.models import BookingState, BookingStatus


def booked_starts(day: date, bookings: Iterable[BookingStatus]) -> set[str]:
    """Start labels held on ``day`` by bookings that are not done yet."""
    return {
        b.start_time
        for b in bookings
        if b.date == day and b.status is not BookingState.DONE
    }


def available_slots(
    day: date,
    bookings: Iterable[BookingStatus],
    slots: Iterable[TimeSlot],
) -> tuple[TimeSlot, ...]:
    taken = booked_starts(day, bookings)
    return tuple(slot for slot in slots if slot.start not in taken)


def find_conflicts(
    day: date,
    starts: Iterable[str],
    bookings: Iterable[BookingStatus],
) -> list[str]:
    """Selected starts that clash with an existing booking, in selection order."""
    taken = booked_starts(day, bookings)
    return [start for start in starts if start in taken]


def transition(booking: BookingStatus, status: BookingState, at: datetime) -> BookingStatus:
    # both directions are allowed; setting the current status is a no-op
    if booking.status is status:
        return booking
    return replace(booking, status=status, updated_at=at)
