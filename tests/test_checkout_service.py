"""Tests for settling a cart into a committed sale."""

import pytest
import redis
from sqlalchemy.orm import sessionmaker

from studio_pos.domain.cart import StudioBookingForm
from studio_pos.domain.errors import (
    CartClosedError,
    CheckoutInProgressError,
    CheckoutStageError,
    EmptyCartError,
    SlotTakenError,
    StoreError,
    ValidationFailed,
)
from studio_pos.domain.models import BookingState, ItemKind, PaymentMethod, PaymentType
from studio_pos.domain.payment import CustomerContext, PaymentForm, PaymentPolicy
from studio_pos.repos.sql_store import SqlStudioStore
from studio_pos.services.cart_service import CartService
from studio_pos.services.checkout_service import CheckoutService
from tests.conftest import NOW, TODAY, FakeLockService, seed_booking

CASH_200K = PaymentForm(method=PaymentMethod.CASH, type=PaymentType.FULL, amount_paid=200000)


class FailingStore(SqlStudioStore):
    """Store whose writes start failing at a given stage."""

    def __init__(self, db, fail_on: str):
        super().__init__(db)
        self.fail_on = fail_on

    def insert_transaction(self, transaction):
        if self.fail_on == "transaction":
            raise StoreError("disk full")
        return super().insert_transaction(transaction)

    def insert_cart_items(self, transaction_id, items):
        if self.fail_on == "items":
            raise StoreError("disk full")
        return super().insert_cart_items(transaction_id, items)

    def insert_booking_statuses(self, bookings):
        if self.fail_on == "booking_statuses":
            raise StoreError("disk full")
        return super().insert_booking_statuses(bookings)


class InterleavingStore(SqlStudioStore):
    """Store that lets another request run right after the items stage."""

    def __init__(self, db, between_stages):
        super().__init__(db)
        self.between_stages = between_stages

    def insert_cart_items(self, transaction_id, items):
        super().insert_cart_items(transaction_id, items)
        self.between_stages()


class UnreachableLock(FakeLockService):
    """Acquires fine, then loses Redis before release."""

    def release_checkout_lock(self, cart_id, token):
        raise redis.ConnectionError("connection refused")


class BlindStore(SqlStudioStore):
    """Store that hides bookings from reads, so only the unique index guards slots."""

    def list_bookings(self, day=None):
        return []


def checkout_service(db, store, catalog, lock) -> CheckoutService:
    return CheckoutService(
        db, store, catalog, lock, policy=PaymentPolicy(dp_minimum=50000), now=lambda: NOW
    )


@pytest.fixture
def carts(db, store, catalog) -> CartService:
    return CartService(db, store, catalog, today=lambda: TODAY)


@pytest.fixture
def service(db, store, catalog, lock) -> CheckoutService:
    return checkout_service(db, store, catalog, lock)


@pytest.fixture
def andi_cart(carts, operator, future_day) -> int:
    """Andi books 11:00 and 13:00 on a future day."""
    cart_id = carts.open_cart(operator.id)["cart_id"]
    carts.add_studio_items(
        operator.id,
        cart_id,
        StudioBookingForm(
            date=future_day,
            selected_times=("11:00", "13:00"),
            customer_name="Andi",
            customer_phone="0812",
        ),
    )
    return cart_id


class TestSettle:
    def test_full_cash_checkout(self, service, store, carts, operator, andi_cart, future_day, lock):
        result = service.settle(andi_cart, operator, CASH_200K, CustomerContext())

        tx = result.transaction
        assert tx.total == 170000
        assert tx.amount_paid == 200000
        assert tx.change == 30000
        assert tx.customer_name == "Andi"
        assert tx.customer_phone == "0812"
        assert tx.created_by == operator.id
        assert tx.created_at == NOW

        [stored] = store.list_transactions()
        assert stored.id == tx.id
        assert len(stored.items) == 2

        bookings = store.list_bookings(future_day)
        assert [b.start_time for b in bookings] == ["11:00", "13:00"]
        assert all(b.status is BookingState.ON_PROCESS for b in bookings)
        assert all(b.transaction_id == tx.id for b in bookings)
        assert {b.id for b in bookings} == {b.id for b in result.bookings}

        view = carts.get_cart(andi_cart, operator.id)
        assert view["items"] == []
        assert view["status"] == "CHECKED_OUT"
        assert lock.held == {}

    def test_product_only_sale_writes_no_bookings(self, service, store, carts, operator):
        cart_id = carts.open_cart(operator.id)["cart_id"]
        carts.add_product(operator.id, cart_id, "7")
        carts.add_product(operator.id, cart_id, "7")
        form = PaymentForm(method=PaymentMethod.QRIS, type=PaymentType.FULL)

        result = service.settle(cart_id, operator, form, CustomerContext(name="Sari", phone="0899"))

        assert result.bookings == ()
        assert result.transaction.total == 10000
        assert result.transaction.amount_paid == 10000
        assert result.transaction.customer_name == "Sari"
        assert result.transaction.items[0].kind is ItemKind.PRODUCT
        assert result.transaction.items[0].quantity == 2
        assert store.list_bookings() == []

    def test_down_payment(self, service, operator, andi_cart):
        form = PaymentForm(method=PaymentMethod.TRANSFER, type=PaymentType.DP, dp_amount=85000)

        result = service.settle(andi_cart, operator, form, CustomerContext())

        assert result.transaction.amount_paid == 85000
        assert result.transaction.dp_amount == 85000
        assert result.transaction.remaining_amount == 85000
        assert result.settlement.change == 0

    def test_invalid_payment_writes_nothing(self, service, store, carts, operator, andi_cart, lock):
        short = PaymentForm(method=PaymentMethod.CASH, type=PaymentType.FULL, amount_paid=80000)

        with pytest.raises(ValidationFailed):
            service.settle(andi_cart, operator, short, CustomerContext())

        assert store.list_transactions() == []
        assert len(carts.get_cart(andi_cart, operator.id)["items"]) == 2
        assert lock.held == {}

    def test_empty_cart(self, service, carts, operator):
        cart_id = carts.open_cart(operator.id)["cart_id"]

        with pytest.raises(EmptyCartError):
            service.settle(cart_id, operator, CASH_200K, CustomerContext())

    def test_second_submit_finds_cart_closed(self, service, store, operator, andi_cart):
        service.settle(andi_cart, operator, CASH_200K, CustomerContext())

        with pytest.raises(CartClosedError):
            service.settle(andi_cart, operator, CASH_200K, CustomerContext())

        assert len(store.list_transactions()) == 1

    def test_concurrent_submit_is_blocked(self, service, store, operator, andi_cart, lock):
        lock.held[andi_cart] = "other-request"

        with pytest.raises(CheckoutInProgressError):
            service.settle(andi_cart, operator, CASH_200K, CustomerContext())

        assert store.list_transactions() == []
        assert lock.held == {andi_cart: "other-request"}


class TestCommitRecheck:
    def test_slot_booked_meanwhile_is_rejected_before_any_write(
        self, service, store, carts, operator, andi_cart, future_day
    ):
        """Another till booked 13:00 after it went into this cart."""
        seed_booking(store, future_day, "13:00")

        with pytest.raises(SlotTakenError) as exc:
            service.settle(andi_cart, operator, CASH_200K, CustomerContext())

        assert exc.value.times == ("13:00",)
        assert len(store.list_transactions()) == 1  # only the seeded one
        assert [b.start_time for b in store.list_bookings(future_day)] == ["13:00"]
        assert carts.get_cart(andi_cart, operator.id)["status"] == "ACTIVE"

    def test_unique_index_catches_what_the_recheck_missed(
        self, db, store, catalog, lock, operator, andi_cart, future_day
    ):
        seed_booking(store, future_day, "13:00")
        blind = checkout_service(db, BlindStore(db), catalog, lock)

        with pytest.raises(CheckoutStageError) as exc:
            blind.settle(andi_cart, operator, CASH_200K, CustomerContext())

        assert exc.value.stage == "booking_statuses"
        assert exc.value.transaction_id is not None
        assert "13:00" in exc.value.errors["times"]
        # earlier stages stay committed for reconciliation
        assert len(store.list_transactions()) == 2
        assert [b.start_time for b in store.list_bookings(future_day)] == ["13:00"]


class TestStageFailures:
    @pytest.mark.parametrize(
        "stage, transactions, bookings",
        [
            ("transaction", 0, 0),
            ("items", 1, 0),
            ("booking_statuses", 1, 0),
        ],
    )
    def test_failure_names_stage_and_keeps_earlier_writes(
        self, db, store, catalog, lock, carts, operator, andi_cart, stage, transactions, bookings
    ):
        failing = checkout_service(db, FailingStore(db, stage), catalog, lock)

        with pytest.raises(CheckoutStageError) as exc:
            failing.settle(andi_cart, operator, CASH_200K, CustomerContext())

        assert exc.value.stage == stage
        assert exc.value.message == f"Failed to save {stage.replace('_', ' ')}"
        assert (exc.value.transaction_id is None) == (stage == "transaction")
        assert len(store.list_transactions()) == transactions
        assert len(store.list_bookings()) == bookings
        assert carts.get_cart(andi_cart, operator.id)["status"] == "ACTIVE"
        assert lock.held == {}

    def test_items_failure_leaves_header_without_items(self, db, store, catalog, lock, operator, andi_cart):
        failing = checkout_service(db, FailingStore(db, "items"), catalog, lock)

        with pytest.raises(CheckoutStageError):
            failing.settle(andi_cart, operator, CASH_200K, CustomerContext())

        [header] = store.list_transactions()
        assert header.items == ()


class TestValidate:
    def test_preview_does_not_write(self, service, store, operator, andi_cart):
        settlement = service.validate(andi_cart, operator.id, CASH_200K, CustomerContext())

        assert settlement.total == 170000
        assert settlement.change == 30000
        assert store.list_transactions() == []

    def test_preview_reports_errors(self, service, operator, andi_cart):
        form = PaymentForm(method=PaymentMethod.CASH, type=PaymentType.DP, dp_amount=10000)

        with pytest.raises(ValidationFailed) as exc:
            service.validate(andi_cart, operator.id, form, CustomerContext())

        assert "payment" in exc.value.errors


class TestCartAfterCheckout:
    def test_line_added_during_checkout_is_kept(
        self, db, engine, catalog, lock, carts, operator, andi_cart
    ):
        """Another request adds coffee while the sale is being written."""
        other = sessionmaker(bind=engine, autocommit=False, autoflush=False)()

        def add_coffee():
            CartService(other, SqlStudioStore(other), catalog, today=lambda: TODAY).add_product(
                operator.id, andi_cart, "7"
            )

        interleaving = checkout_service(db, InterleavingStore(db, add_coffee), catalog, lock)
        try:
            result = interleaving.settle(andi_cart, operator, CASH_200K, CustomerContext())
        finally:
            other.close()

        assert [i.kind for i in result.transaction.items] == [ItemKind.STUDIO, ItemKind.STUDIO]
        view = carts.get_cart(andi_cart, operator.id)
        assert view["status"] == "ACTIVE"
        assert "Kopi" in [i["name"] for i in view["items"]]

    def test_unchanged_cart_is_closed(self, service, carts, operator, andi_cart):
        service.settle(andi_cart, operator, CASH_200K, CustomerContext())

        assert carts.get_cart(andi_cart, operator.id)["status"] == "CHECKED_OUT"

    def test_lost_lock_release_does_not_hide_sale(self, db, store, catalog, operator, andi_cart):
        service = checkout_service(db, store, catalog, UnreachableLock())

        result = service.settle(andi_cart, operator, CASH_200K, CustomerContext())

        assert [t.id for t in store.list_transactions()] == [result.transaction.id]
