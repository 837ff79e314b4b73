"""Unit tests for slot availability and booking status transitions."""

from datetime import timedelta

from studio_pos.domain.booking import available_slots, booked_starts, find_conflicts, transition
from studio_pos.domain.models import BookingState
from tests.conftest import NOW, TODAY, make_booking


class TestAvailableSlots:
    def test_all_slots_free_without_bookings(self, catalog):
        assert available_slots(TODAY, [], catalog.slots) == catalog.slots

    def test_on_process_booking_blocks_its_start(self, catalog):
        """No double-booking: a live booking hides its slot."""
        bookings = [make_booking(TODAY, "15:00")]

        starts = [s.start for s in available_slots(TODAY, bookings, catalog.slots)]

        assert "15:00" not in starts
        assert len(starts) == len(catalog.slots) - 1

    def test_done_booking_reopens_slot(self, catalog):
        bookings = [make_booking(TODAY, "15:00", BookingState.DONE)]

        starts = [s.start for s in available_slots(TODAY, bookings, catalog.slots)]

        assert "15:00" in starts

    def test_bookings_on_other_dates_are_ignored(self, catalog):
        bookings = [make_booking(TODAY + timedelta(days=1), "15:00")]

        assert available_slots(TODAY, bookings, catalog.slots) == catalog.slots

    def test_done_and_live_booking_on_same_slot(self, catalog):
        bookings = [
            make_booking(TODAY, "11:00", BookingState.DONE),
            make_booking(TODAY, "11:00"),
        ]

        assert "11:00" not in booked_starts(TODAY, [])
        assert "11:00" in booked_starts(TODAY, bookings)


class TestFindConflicts:
    def test_reports_each_conflict_in_selection_order(self):
        bookings = [make_booking(TODAY, "13:00"), make_booking(TODAY, "11:00")]

        assert find_conflicts(TODAY, ["11:00", "15:00", "13:00"], bookings) == ["11:00", "13:00"]


class TestTransition:
    def test_on_process_to_done_refreshes_timestamp(self):
        booking = make_booking(TODAY, "11:00")
        later = NOW + timedelta(hours=3)

        done = transition(booking, BookingState.DONE, later)

        assert done.status is BookingState.DONE
        assert done.updated_at == later
        assert booking.status is BookingState.ON_PROCESS

    def test_done_can_go_back_to_on_process(self):
        booking = make_booking(TODAY, "11:00", BookingState.DONE)

        assert transition(booking, BookingState.ON_PROCESS, NOW).status is BookingState.ON_PROCESS

    def test_same_status_is_a_no_op(self):
        booking = make_booking(TODAY, "11:00")

        assert transition(booking, BookingState.ON_PROCESS, NOW + timedelta(days=1)) is booking
