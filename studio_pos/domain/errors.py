"""Domain error codes for the studio POS core.

Validation errors carry one message per field or rule so the caller can
show them next to the input that caused them.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    SLOT_TAKEN = "SLOT_TAKEN"
    CART_NOT_FOUND = "CART_NOT_FOUND"
    CART_ITEM_NOT_FOUND = "CART_ITEM_NOT_FOUND"
    CART_ACCESS_DENIED = "CART_ACCESS_DENIED"
    CART_CONFLICT = "CART_CONFLICT"
    CART_CLOSED = "CART_CLOSED"
    EMPTY_CART = "EMPTY_CART"
    CHECKOUT_IN_PROGRESS = "CHECKOUT_IN_PROGRESS"
    CHECKOUT_STAGE_FAILED = "CHECKOUT_STAGE_FAILED"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    OPERATOR_NOT_FOUND = "OPERATOR_NOT_FOUND"
    STORE_FAILURE = "STORE_FAILURE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationFailed(DomainError):
    """User-correctable input problems, keyed by field or rule."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message="; ".join(errors.values()),
        )
        self.errors = dict(errors)


class SlotTakenError(DomainError):
    """Raised when a slot was booked by someone else before commit."""

    def __init__(self, times) -> None:
        times = tuple(times)
        super().__init__(
            code=ErrorCode.SLOT_TAKEN,
            message=f"Time {', '.join(times)} already booked, please retry",
        )
        self.times = times
        self.errors = {"times": self.message}


class CheckoutStageError(DomainError):
    """Raised when a checkout write fails; earlier stages stay committed."""

    def __init__(
        self,
        stage: str,
        transaction_id: str | None = None,
        errors: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CHECKOUT_STAGE_FAILED,
            message=f"Failed to save {stage.replace('_', ' ')}",
        )
        self.stage = stage
        self.transaction_id = transaction_id
        self.errors = dict(errors or {})


class StoreError(DomainError):
    """Raised by a store when the underlying record store fails."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.STORE_FAILURE, message=message)


class CartNotFoundError(DomainError):
    def __init__(self, cart_id: int) -> None:
        super().__init__(code=ErrorCode.CART_NOT_FOUND, message="Cart not found")
        self.cart_id = cart_id


class CartItemNotFoundError(DomainError):
    def __init__(self, item_id: str) -> None:
        super().__init__(code=ErrorCode.CART_ITEM_NOT_FOUND, message="Cart item not found")
        self.item_id = item_id


class CartAccessDeniedError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CART_ACCESS_DENIED,
            message="Cart belongs to another operator",
        )


class CartConflictError(DomainError):
    """Raised when the cart was modified by another operation."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CART_CONFLICT,
            message="Cart was modified by another operation",
        )


class CartClosedError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.CART_CLOSED, message="Cart can no longer be modified")


class EmptyCartError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.EMPTY_CART, message="Cart is empty")


class CheckoutInProgressError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CHECKOUT_IN_PROGRESS,
            message="Checkout already in progress for this cart",
        )


class BookingNotFoundError(DomainError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(code=ErrorCode.BOOKING_NOT_FOUND, message="Booking not found")
        self.booking_id = booking_id


class ProductNotFoundError(DomainError):
    def __init__(self, product_id: str) -> None:
        super().__init__(code=ErrorCode.PRODUCT_NOT_FOUND, message="Product not found")
        self.product_id = product_id


class OperatorNotFoundError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.OPERATOR_NOT_FOUND, message="Operator not found")
