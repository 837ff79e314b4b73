# studio_pos/repos/sql_store.py
"""SQLAlchemy implementation of the StudioStore.

Every write commits on its own, so a checkout that fails half way
leaves the earlier records in place for staff to reconcile.
"""

from datetime import date, datetime
from typing import Sequence
from uuid import uuid4

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from studio_pos.data.models.booking_status import BookingStatusModel
from studio_pos.data.models.transaction import TransactionModel
from studio_pos.data.models.transaction_item import TransactionItemModel
from studio_pos.domain.errors import SlotTakenError, StoreError
from studio_pos.domain.models import (
    BookingDetails,
    BookingState,
    BookingStatus,
    CartItem,
    ItemKind,
    PaymentMethod,
    PaymentType,
    Transaction,
)
from studio_pos.repos.interfaces import StudioStore
from studio_pos.utils.logging import get_logger

logger = get_logger(__name__)


def details_to_json(details: BookingDetails | None) -> dict | None:
    if details is None:
        return None
    return {
        "date": details.date.isoformat(),
        "start_time": details.start_time,
        "end_time": details.end_time,
        "customer_name": details.customer_name,
        "customer_phone": details.customer_phone,
        "notes": details.notes,
    }


def details_from_json(data: dict | None) -> BookingDetails | None:
    if not data:
        return None
    return BookingDetails(
        date=date.fromisoformat(data["date"]),
        start_time=data["start_time"],
        end_time=data["end_time"],
        customer_name=data["customer_name"],
        customer_phone=data.get("customer_phone"),
        notes=data.get("notes"),
    )


def item_from_row(row) -> CartItem:
    """Works for both cart_items and transaction_items rows."""
    return CartItem(
        id=row.id,
        kind=ItemKind(row.item_type),
        name=row.name,
        price=row.price,
        quantity=row.quantity,
        details=details_from_json(row.details),
    )


def _booking_from_row(row: BookingStatusModel) -> BookingStatus:
    return BookingStatus(
        id=row.id,
        transaction_id=row.transaction_id,
        date=row.booking_date,
        start_time=row.start_time,
        end_time=row.end_time,
        customer_name=row.customer_name,
        customer_phone=row.customer_phone,
        notes=row.notes,
        status=BookingState(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _transaction_from_row(row: TransactionModel) -> Transaction:
    return Transaction(
        id=row.id,
        items=tuple(item_from_row(i) for i in row.items),
        total=row.total,
        amount_paid=row.amount_paid,
        change=row.change_amount,
        payment_method=PaymentMethod(row.payment_method),
        payment_type=PaymentType(row.payment_type),
        dp_amount=row.dp_amount,
        remaining_amount=row.remaining_amount,
        customer_name=row.customer_name,
        customer_phone=row.customer_phone,
        created_at=row.created_at,
        created_by=row.created_by,
    )


class SqlStudioStore(StudioStore):
    """Relational store backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    #query
    def list_bookings(self, day: date | None = None) -> list[BookingStatus]:
        stmt = select(BookingStatusModel)
        if day is not None:
            stmt = stmt.where(BookingStatusModel.booking_date == day)
        stmt = stmt.order_by(BookingStatusModel.booking_date, BookingStatusModel.start_time)
        return [_booking_from_row(r) for r in self.db.execute(stmt).scalars().all()]

    def get_booking(self, booking_id: str) -> BookingStatus | None:
        row = self.db.get(BookingStatusModel, booking_id)
        return _booking_from_row(row) if row else None

    def list_transactions(
        self, start: date | None = None, end: date | None = None
    ) -> list[Transaction]:
        stmt = select(TransactionModel).options(selectinload(TransactionModel.items))
        if start is not None:
            stmt = stmt.where(TransactionModel.created_on >= start)
        if end is not None:
            stmt = stmt.where(TransactionModel.created_on <= end)
        stmt = stmt.order_by(TransactionModel.created_at.desc())
        return [_transaction_from_row(r) for r in self.db.execute(stmt).scalars().all()]

    #commands
    def insert_transaction(self, transaction: Transaction) -> str:
        row = TransactionModel(
            id=transaction.id,
            total=transaction.total,
            amount_paid=transaction.amount_paid,
            change_amount=transaction.change,
            payment_method=transaction.payment_method.value,
            payment_type=transaction.payment_type.value,
            dp_amount=transaction.dp_amount,
            remaining_amount=transaction.remaining_amount,
            customer_name=transaction.customer_name,
            customer_phone=transaction.customer_phone,
            created_by=transaction.created_by,
            created_at=transaction.created_at,
            created_on=transaction.created_at.date(),
        )
        self._commit([row], f"transaction {transaction.id}")
        return transaction.id

    def insert_cart_items(self, transaction_id: str, items: Sequence[CartItem]) -> None:
        rows = [
            TransactionItemModel(
                id=uuid4().hex,
                transaction_id=transaction_id,
                position=position,
                item_type=item.kind.value,
                name=item.name,
                price=item.price,
                quantity=item.quantity,
                details=details_to_json(item.details),
            )
            for position, item in enumerate(items)
        ]
        self._commit(rows, f"items of transaction {transaction_id}")

    def insert_booking_statuses(self, bookings: Sequence[BookingStatus]) -> None:
        if not bookings:
            return

        rows = [
            BookingStatusModel(
                id=b.id,
                transaction_id=b.transaction_id,
                booking_date=b.date,
                start_time=b.start_time,
                end_time=b.end_time,
                customer_name=b.customer_name,
                customer_phone=b.customer_phone,
                notes=b.notes,
                status=b.status.value,
                created_at=b.created_at,
                updated_at=b.updated_at,
            )
            for b in bookings
        ]
        try:
            self.db.add_all(rows)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            taken = self._taken_starts(bookings)
            if taken:
                logger.warning(f"Slot uniqueness rejected booking insert for {taken}")
                raise SlotTakenError(taken) from e
            logger.error(f"Failed to insert booking statuses: {e}")
            raise StoreError("Failed to insert booking statuses") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to insert booking statuses: {e}")
            raise StoreError("Failed to insert booking statuses") from e

    def update_booking_status(
        self, booking_id: str, status: BookingState, updated_at: datetime
    ) -> None:
        stmt = (
            update(BookingStatusModel)
            .where(BookingStatusModel.id == booking_id)
            .values(status=status.value, updated_at=updated_at)
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            booking = self.get_booking(booking_id)
            start = booking.start_time if booking else booking_id
            logger.warning(f"Reopening booking {booking_id} collides with a live booking")
            raise SlotTakenError([start]) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update booking {booking_id}: {e}")
            raise StoreError("Failed to update booking status") from e

    def _commit(self, rows: list, what: str) -> None:
        try:
            self.db.add_all(rows)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to insert {what}: {e}")
            raise StoreError(f"Failed to insert {what}") from e

    def _taken_starts(self, bookings: Sequence[BookingStatus]) -> list[str]:
        taken = []
        for b in bookings:
            stmt = select(BookingStatusModel.id).where(
                BookingStatusModel.booking_date == b.date,
                BookingStatusModel.start_time == b.start_time,
                BookingStatusModel.status == BookingState.ON_PROCESS.value,
            )
            if self.db.execute(stmt).first() is not None:
                taken.append(b.start_time)
        return taken
