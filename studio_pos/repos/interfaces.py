"""Store interfaces (repository pattern).

The checkout core only talks to a StudioStore, so the record store
behind it can be swapped. Stores return domain models.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Sequence

from studio_pos.domain.models import BookingState, BookingStatus, CartItem, Transaction


class StudioStore(ABC):
    """Interface for committed sales and booking persistence."""

    @abstractmethod
    def list_bookings(self, day: date | None = None) -> list[BookingStatus]:
        """Return bookings, optionally for one day, ordered by date and start time."""
        ...

    @abstractmethod
    def get_booking(self, booking_id: str) -> BookingStatus | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def insert_transaction(self, transaction: Transaction) -> str:
        """Persist the transaction header and return its ID.

        Line items are written separately by insert_cart_items.

        Raises:
            StoreError: If the write fails.
        """
        ...

    @abstractmethod
    def insert_cart_items(self, transaction_id: str, items: Sequence[CartItem]) -> None:
        """Persist immutable snapshots of the sold line items.

        Raises:
            StoreError: If the write fails.
        """
        ...

    @abstractmethod
    def insert_booking_statuses(self, bookings: Sequence[BookingStatus]) -> None:
        """Persist booking records.

        Raises:
            SlotTakenError: If a slot already has a live booking.
            StoreError: If the write fails for any other reason.
        """
        ...

    @abstractmethod
    def update_booking_status(
        self, booking_id: str, status: BookingState, updated_at: datetime
    ) -> None:
        """Set a booking status and its update timestamp.

        Raises:
            SlotTakenError: If reopening collides with a newer live booking.
            StoreError: If the write fails for any other reason.
        """
        ...

    @abstractmethod
    def list_transactions(
        self, start: date | None = None, end: date | None = None
    ) -> list[Transaction]:
        """Return transactions with their items, newest first.

        ``start`` and ``end`` are inclusive business dates.
        """
        ...
