"""Pytest configuration and shared fixtures."""

import os

# must be set before studio_pos builds its engine
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studio_pos.api.deps import get_lock_service
from studio_pos.data.database import get_db, init_db
from studio_pos.data.models.user import UserModel
from studio_pos.domain.catalog import DEFAULT_PRODUCTS, Catalog, build_slots
from studio_pos.domain.models import (
    BookingState,
    BookingStatus,
    Operator,
    PaymentMethod,
    PaymentType,
    Transaction,
)
from studio_pos.main import app
from studio_pos.repos.sql_store import SqlStudioStore
from studio_pos.utils.clock import STUDIO_TZ

TODAY = date(2030, 1, 15)
NOW = datetime(2030, 1, 15, 10, 30, tzinfo=STUDIO_TZ)


class FakeLockService:
    """In-memory stand-in for the Redis checkout lock."""

    def __init__(self):
        self.held: dict[int, str] = {}
        self.acquired: list[int] = []

    def acquire_checkout_lock(self, cart_id: int, token: str, ttl: int) -> bool:
        if cart_id in self.held:
            return False
        self.held[cart_id] = token
        self.acquired.append(cart_id)
        return True

    def release_checkout_lock(self, cart_id: int, token: str) -> bool:
        if self.held.get(cart_id) != token:
            return False
        del self.held[cart_id]
        return True


def make_booking(
    day: date,
    start: str,
    status: BookingState = BookingState.ON_PROCESS,
    transaction_id: str = "t-1",
) -> BookingStatus:
    return BookingStatus(
        id=uuid4().hex,
        transaction_id=transaction_id,
        date=day,
        start_time=start,
        end_time=f"{(int(start[:2]) + 2) % 24:02d}:00",
        customer_name="Budi",
        status=status,
        created_at=NOW,
        updated_at=NOW,
    )


def make_transaction(total: int = 85000, created_at: datetime = NOW, items=()) -> Transaction:
    return Transaction(
        id=uuid4().hex,
        items=tuple(items),
        total=total,
        amount_paid=total,
        change=0,
        payment_method=PaymentMethod.QRIS,
        payment_type=PaymentType.FULL,
        customer_name="Budi",
        created_at=created_at,
        created_by=1,
    )


def seed_booking(store, day: date, start: str, status=BookingState.ON_PROCESS) -> BookingStatus:
    """Commit a booking the way another till would have."""
    transaction = make_transaction()
    store.insert_transaction(transaction)
    booking = make_booking(day, start, status, transaction_id=transaction.id)
    store.insert_booking_statuses([booking])
    return booking


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        studio_name="Studio Gegana",
        studio_price=85000,
        slots=build_slots(11, 2, 7),
        products=DEFAULT_PRODUCTS,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def store(db) -> SqlStudioStore:
    return SqlStudioStore(db)


@pytest.fixture
def operator(db) -> Operator:
    db.add(UserModel(id=1, name="Staff One", role="staff"))
    db.commit()
    return Operator(id=1, name="Staff One")


@pytest.fixture
def lock() -> FakeLockService:
    return FakeLockService()


@pytest.fixture
def future_day() -> date:
    return TODAY + timedelta(days=3)


@pytest.fixture
def client(db, lock, operator):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_lock_service] = lambda: lock
    client = TestClient(app)
    client.headers.update({"X-Operator-Id": str(operator.id)})
    yield client
    app.dependency_overrides.clear()
