"""Domain models for the booking, cart and checkout workflow.

These are plain values with no persistence or API concerns.
ORM tables live in studio_pos/data/models (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class ItemKind(str, Enum):
    STUDIO = "studio"
    PRODUCT = "product"


class PaymentMethod(str, Enum):
    CASH = "cash"
    QRIS = "qris"
    TRANSFER = "transfer"


class PaymentType(str, Enum):
    FULL = "full"
    DP = "dp"


class BookingState(str, Enum):
    ON_PROCESS = "on_process"
    DONE = "done"


@dataclass(frozen=True)
class BookingDetails:
    """Who booked which slot on which day."""

    date: date
    start_time: str
    end_time: str
    customer_name: str
    customer_phone: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class CartItem:
    """A line item of an uncommitted order.

    Studio items always carry booking details and represent exactly one
    slot; product items never carry details.
    """

    id: str
    kind: ItemKind
    name: str
    price: int
    quantity: int = 1
    details: BookingDetails | None = None

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError("Item price cannot be negative")
        if self.quantity < 1:
            raise ValueError("Item quantity must be at least 1")
        if self.kind is ItemKind.STUDIO:
            if self.details is None:
                raise ValueError("Studio item requires booking details")
            if self.quantity != 1:
                raise ValueError("Studio item quantity is always 1")
        elif self.details is not None:
            raise ValueError("Product item cannot carry booking details")

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


@dataclass(frozen=True)
class Transaction:
    """A committed sale. Never mutated after checkout."""

    id: str
    items: tuple[CartItem, ...]
    total: int
    amount_paid: int
    change: int
    payment_method: PaymentMethod
    payment_type: PaymentType
    customer_name: str
    created_at: datetime
    created_by: int
    customer_phone: str | None = None
    dp_amount: int | None = None
    remaining_amount: int | None = None


@dataclass(frozen=True)
class BookingStatus:
    """Lifecycle record of one booked studio slot."""

    id: str
    transaction_id: str
    date: date
    start_time: str
    end_time: str
    customer_name: str
    status: BookingState
    created_at: datetime
    customer_phone: str | None = None
    notes: str | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Operator:
    """Staff member stamped as ``created_by`` on transactions."""

    id: int
    name: str
