"""In-progress order: an ordered list of studio and product line items.

Insertion order is kept for display only; totals do not depend on it.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Iterable
from uuid import uuid4

from studio_pos.domain.booking import booked_starts
from studio_pos.domain.catalog import Catalog, Product
from studio_pos.domain.errors import CartItemNotFoundError, ValidationFailed
from studio_pos.domain.models import BookingDetails, BookingStatus, CartItem, ItemKind


@dataclass(frozen=True)
class StudioBookingForm:
    """Booking form input: one customer, one day, one or more slot starts."""

    date: date | None
    selected_times: tuple[str, ...]
    customer_name: str
    customer_phone: str | None = None
    notes: str | None = None


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _new_item_id() -> str:
    return uuid4().hex


class Cart:
    def __init__(
        self,
        catalog: Catalog,
        items: Iterable[CartItem] = (),
        id_factory: Callable[[], str] = _new_item_id,
    ):
        self.catalog = catalog
        self.items: list[CartItem] = list(items)
        self._new_id = id_factory

    # queries
    def total(self) -> int:
        return sum(item.price * item.quantity for item in self.items)

    def get(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    @property
    def studio_items(self) -> list[CartItem]:
        return [i for i in self.items if i.kind is ItemKind.STUDIO]

    @property
    def product_items(self) -> list[CartItem]:
        return [i for i in self.items if i.kind is ItemKind.PRODUCT]

    def is_empty(self) -> bool:
        return not self.items

    # commands
    def add_studio_items(
        self,
        form: StudioBookingForm,
        bookings: Iterable[BookingStatus],
        today: date,
    ) -> list[CartItem]:
        """Append one studio item per selected start, or nothing at all.

        Raises:
            ValidationFailed: blank customer name, missing or past date,
                no session selected, unknown session or a session already
                booked on that date. Conflicting times are listed together.
        """
        errors: dict[str, str] = {}
        selected = list(dict.fromkeys(form.selected_times))

        if not form.customer_name or not form.customer_name.strip():
            errors["customer_name"] = "Customer name is required"

        if form.date is None:
            errors["date"] = "Date is required"
        elif form.date < today:
            errors["date"] = "Date cannot be in the past"

        if not selected:
            errors["times"] = "Select at least one session"
        else:
            unknown = [s for s in selected if self.catalog.slot_for(s) is None]
            if unknown:
                errors["times"] = f"Unknown session {', '.join(unknown)}"
            elif form.date is not None:
                # slots already in this cart count as taken too
                taken = booked_starts(form.date, bookings) | {
                    i.details.start_time
                    for i in self.studio_items
                    if i.details.date == form.date
                }
                conflicts = [s for s in selected if s in taken]
                if conflicts:
                    errors["times"] = f"Time {', '.join(conflicts)} already booked"

        if errors:
            raise ValidationFailed(errors)

        new_items = []
        for start in selected:
            slot = self.catalog.slot_for(start)
            new_items.append(
                CartItem(
                    id=self._new_id(),
                    kind=ItemKind.STUDIO,
                    name=self.catalog.studio_item_name(slot),
                    price=self.catalog.studio_price,
                    quantity=1,
                    details=BookingDetails(
                        date=form.date,
                        start_time=slot.start,
                        end_time=slot.end,
                        customer_name=form.customer_name.strip(),
                        customer_phone=_blank_to_none(form.customer_phone),
                        notes=_blank_to_none(form.notes),
                    ),
                )
            )

        self.items.extend(new_items)
        return new_items

    def add_product(self, product: Product) -> CartItem:
        # catalog names are unique, so the name identifies the product line
        for index, item in enumerate(self.items):
            if item.kind is ItemKind.PRODUCT and item.name == product.name:
                merged = replace(item, quantity=item.quantity + 1)
                self.items[index] = merged
                return merged

        item = CartItem(
            id=self._new_id(),
            kind=ItemKind.PRODUCT,
            name=product.name,
            price=product.price,
            quantity=1,
        )
        self.items.append(item)
        return item

    def update_quantity(self, item_id: str, quantity: int) -> CartItem | None:
        """Set a line quantity; 0 removes the line and returns None."""
        if quantity < 0:
            raise ValidationFailed({"quantity": "Quantity cannot be negative"})

        for index, item in enumerate(self.items):
            if item.id != item_id:
                continue
            if quantity == 0:
                del self.items[index]
                return None
            if item.kind is ItemKind.STUDIO and quantity != 1:
                raise ValidationFailed({"quantity": "A studio session always has quantity 1"})
            updated = replace(item, quantity=quantity)
            self.items[index] = updated
            return updated

        raise CartItemNotFoundError(item_id)

    def remove(self, item_id: str) -> bool:
        before = len(self.items)
        self.items = [item for item in self.items if item.id != item_id]
        return len(self.items) != before

    def clear(self) -> None:
        self.items = []
