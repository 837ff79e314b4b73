from datetime import date, datetime
from typing import Callable

from studio_pos.domain.booking import available_slots, transition
from studio_pos.domain.catalog import Catalog, TimeSlot
from studio_pos.domain.errors import BookingNotFoundError
from studio_pos.domain.models import BookingState, BookingStatus
from studio_pos.repos.interfaces import StudioStore
from studio_pos.utils import clock
from studio_pos.utils.logging import get_logger

logger = get_logger(__name__)


class BookingService:
    """Slot availability and the on_process/done lifecycle of bookings."""

    def __init__(
        self,
        store: StudioStore,
        catalog: Catalog,
        now: Callable[[], datetime] = clock.now,
    ):
        self.store = store
        self.catalog = catalog
        self.now = now

    def list_bookings(self, day: date | None = None) -> list[BookingStatus]:
        return self.store.list_bookings(day)

    def available_slots(self, day: date) -> tuple[TimeSlot, ...]:
        return available_slots(day, self.store.list_bookings(day), self.catalog.slots)

    def set_status(self, booking_id: str, status: BookingState) -> BookingStatus:
        """Move a booking to ``status``.

        Any status may follow any other. The stored record is written
        first; the returned value reflects what was persisted.

        Raises:
            BookingNotFoundError: If the booking does not exist.
            SlotTakenError: If reopening collides with a newer live booking.
            StoreError: If the store rejects the write.
        """
        booking = self.store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)

        updated = transition(booking, status, self.now())
        if updated is booking:
            return booking

        self.store.update_booking_status(booking_id, status, updated.updated_at)
        logger.info(
            f"Booking {booking_id} ({booking.date} {booking.start_time}) "
            f"{booking.status.value} -> {status.value}"
        )
        return updated
