# studio_pos/services/checkout_service.py
from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import uuid4

import redis
from sqlalchemy.orm import Session

from studio_pos.domain.booking import find_conflicts
from studio_pos.domain.cart import Cart
from studio_pos.domain.catalog import Catalog
from studio_pos.domain.errors import (
    CartClosedError,
    CartConflictError,
    CheckoutInProgressError,
    CheckoutStageError,
    EmptyCartError,
    SlotTakenError,
    StoreError,
    ValidationFailed,
)
from studio_pos.domain.models import (
    BookingState,
    BookingStatus,
    Operator,
    Transaction,
)
from studio_pos.domain.payment import (
    CustomerContext,
    PaymentForm,
    PaymentPolicy,
    Settlement,
    compute_settlement,
    resolve_customer,
    validate_payment,
)
from studio_pos.repos.interfaces import StudioStore
from studio_pos.services.cart_service import CartService
from studio_pos.utils import clock
from studio_pos.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from studio_pos.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    transaction: Transaction
    bookings: tuple[BookingStatus, ...]
    settlement: Settlement


class CheckoutService:
    """
    Settles a cart into a committed sale.
    Kept apart from CartService: the cart only knows line items,
    checkout knows payments and the record store.
    """

    def __init__(
        self,
        db: Session,
        store: StudioStore,
        catalog: Catalog,
        lock_service,
        policy: PaymentPolicy = PaymentPolicy(),
        now: Callable[[], datetime] = clock.now,
        lock_ttl: int = CHECKOUT_LOCK_TTL_SECONDS,
    ):
        self.carts = CartService(db, store, catalog, today=lambda: now().date())
        self.store = store
        self.lock_service = lock_service
        self.policy = policy
        self.now = now
        self.lock_ttl = lock_ttl

    def validate(
        self,
        cart_id: int,
        user_id: int,
        form: PaymentForm,
        customer: CustomerContext,
    ) -> Settlement:
        """Check a payment and preview what settling it would record."""
        _, cart = self.carts.load(cart_id, user_id)
        if cart.is_empty():
            raise EmptyCartError()

        validate_payment(cart, form, customer, self.policy)
        return compute_settlement(cart.total(), form)

    def settle(
        self,
        cart_id: int,
        operator: Operator,
        form: PaymentForm,
        customer: CustomerContext,
    ) -> CheckoutResult:
        """
        Use Case: settle the cart.

        1. Blocks a second commit of the same cart (checkout lock)
        2. Validates the payment and re-checks slots against fresh bookings
        3. Writes transaction, then items, then booking statuses
        4. Closes the cart

        A failing write raises CheckoutStageError naming the stage;
        stages already written are not rolled back.
        """
        token = uuid4().hex
        if not self.lock_service.acquire_checkout_lock(cart_id, token, self.lock_ttl):
            logger.warning(f"Checkout of cart {cart_id} already in progress")
            raise CheckoutInProgressError()

        try:
            model, cart = self.carts.load(cart_id, operator.id)
            # checkout stages commit on this session and reload model, keep the version we read
            loaded_version = model.version
            if model.status != "ACTIVE":
                raise CartClosedError()
            if cart.is_empty():
                raise EmptyCartError()

            try:
                validate_payment(cart, form, customer, self.policy)
            except ValidationFailed as e:
                logger.info(f"Payment for cart {cart_id} rejected: {e.errors}")
                raise
            self._recheck_slots(cart)

            total = cart.total()
            settlement = compute_settlement(total, form)
            customer_name, customer_phone = resolve_customer(cart, customer)
            created_at = self.now()

            transaction = Transaction(
                id=uuid4().hex,
                items=tuple(cart.items),
                total=total,
                amount_paid=settlement.amount_paid,
                change=settlement.change,
                payment_method=form.method,
                payment_type=form.type,
                dp_amount=settlement.dp_amount,
                remaining_amount=settlement.remaining_amount,
                customer_name=customer_name,
                customer_phone=customer_phone,
                created_at=created_at,
                created_by=operator.id,
            )

            self._write("transaction", None, self.store.insert_transaction, transaction)
            logger.info(f"Transaction {transaction.id} created from cart {cart_id}")

            self._write(
                "items", transaction.id,
                self.store.insert_cart_items, transaction.id, transaction.items,
            )

            bookings = tuple(
                BookingStatus(
                    id=uuid4().hex,
                    transaction_id=transaction.id,
                    date=item.details.date,
                    start_time=item.details.start_time,
                    end_time=item.details.end_time,
                    customer_name=item.details.customer_name or customer_name,
                    customer_phone=item.details.customer_phone or customer_phone,
                    notes=item.details.notes,
                    status=BookingState.ON_PROCESS,
                    created_at=created_at,
                    updated_at=created_at,
                )
                for item in cart.studio_items
            )
            if bookings:
                self._write(
                    "booking_statuses", transaction.id,
                    self.store.insert_booking_statuses, bookings,
                )

            try:
                self.carts.close_after_checkout(model, cart, loaded_version)
            except CartConflictError:
                # the sale is recorded; a stale cart is only a display problem
                logger.warning(f"Cart {cart_id} changed during checkout, not closed")

            logger.info(
                f"Checkout of cart {cart_id} done: transaction {transaction.id}, "
                f"{len(transaction.items)} item(s), {len(bookings)} booking(s), total {total}"
            )
            return CheckoutResult(transaction=transaction, bookings=bookings, settlement=settlement)

        finally:
            self._release(cart_id, token)

    def _release(self, cart_id: int, token: str) -> None:
        try:
            self.lock_service.release_checkout_lock(cart_id, token)
        except redis.RedisError as e:
            # the key expires on its own; a failed release must not hide the outcome
            logger.error(f"Failed to release checkout lock of cart {cart_id}: {e}")

    def _recheck_slots(self, cart: Cart) -> None:
        # the cart was filled from an older snapshot of bookings
        taken = []
        for day in sorted({i.details.date for i in cart.studio_items}):
            starts = [i.details.start_time for i in cart.studio_items if i.details.date == day]
            taken.extend(find_conflicts(day, starts, self.store.list_bookings(day)))
        if taken:
            logger.info(f"Slots {taken} were booked before checkout")
            raise SlotTakenError(taken)

    def _write(self, stage: str, transaction_id: str | None, write, *args) -> None:
        try:
            write(*args)
        except SlotTakenError as e:
            logger.error(
                f"Checkout stage {stage} failed for transaction {transaction_id}: {e.message}"
            )
            raise CheckoutStageError(stage, transaction_id, errors=e.errors) from e
        except StoreError as e:
            logger.error(
                f"Checkout stage {stage} failed for transaction {transaction_id}: {e.message}"
            )
            raise CheckoutStageError(stage, transaction_id) from e
