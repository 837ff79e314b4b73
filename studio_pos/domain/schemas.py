# studio_pos/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal
import datetime as dt

from studio_pos.domain.models import BookingState, PaymentMethod, PaymentType


class UserCreate(BaseModel):
    """Schema for registering an operator."""

    id: int = Field(..., gt=0, description="Operator ID (must be > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    role: Literal["admin", "staff"] = "staff"


class UserRead(BaseModel):
    """Schema for an operator (response)."""

    id: int
    name: str
    role: str

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: str
    name: str
    price: int

    model_config = ConfigDict(from_attributes=True)


class TimeSlotOut(BaseModel):
    start: str
    end: str

    model_config = ConfigDict(from_attributes=True)


class CatalogOut(BaseModel):
    """Schema for the static catalog (response)."""

    studio_name: str
    studio_price: int
    slots: List[TimeSlotOut]
    products: List[ProductOut]

    model_config = ConfigDict(from_attributes=True)


class StudioItemsIn(BaseModel):
    """Schema for booking one or more studio sessions into the cart.

    Required-field rules are checked by the cart itself so every
    problem is reported together.
    """

    date: dt.date | None = None
    selected_times: List[str] = Field(default_factory=list, description='Slot starts, e.g. "15:00"')
    customer_name: str = ""
    customer_phone: str | None = None
    notes: str | None = None


class ProductIn(BaseModel):
    """Schema for adding a catalog product to the cart."""

    product_id: str = Field(..., min_length=1, description="Catalog product ID")


class QuantityIn(BaseModel):
    """Schema for changing a line quantity; 0 removes the line."""

    quantity: int = Field(..., ge=0)


class BookingDetailsOut(BaseModel):
    date: dt.date
    start_time: str
    end_time: str
    customer_name: str
    customer_phone: str | None = None
    notes: str | None = None


class CartItemOut(BaseModel):
    """Schema for a cart line (response)."""

    id: str
    type: str
    name: str
    price: int
    quantity: int
    line_total: int
    details: BookingDetailsOut | None = None


class CartOut(BaseModel):
    """Schema for the cart (response)."""

    cart_id: int
    user_id: int
    status: str
    items: List[CartItemOut]
    total: int

    model_config = ConfigDict(from_attributes=True)


class PaymentIn(BaseModel):
    """Schema for a payment proposal.

    ``customer_name``/``customer_phone`` identify the buyer of a sale
    without studio sessions.
    """

    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_type: PaymentType = PaymentType.FULL
    amount_paid: int | None = Field(None, ge=0, description="Cash tendered")
    dp_amount: int | None = Field(None, ge=0, description="Deposit for dp payments")
    customer_name: str | None = None
    customer_phone: str | None = None


class SettlementOut(BaseModel):
    total: int
    amount_paid: int
    change: int
    dp_amount: int | None = None
    remaining_amount: int | None = None

    model_config = ConfigDict(from_attributes=True)


class TransactionOut(BaseModel):
    """Schema for a committed sale (response)."""

    id: str
    items: List[CartItemOut]
    total: int
    amount_paid: int
    change: int
    payment_method: PaymentMethod
    payment_type: PaymentType
    dp_amount: int | None = None
    remaining_amount: int | None = None
    customer_name: str
    customer_phone: str | None = None
    created_at: dt.datetime
    created_by: int


class BookingStatusOut(BaseModel):
    """Schema for a booking record (response)."""

    id: str
    transaction_id: str
    date: dt.date
    start_time: str
    end_time: str
    customer_name: str
    customer_phone: str | None = None
    notes: str | None = None
    status: BookingState
    created_at: dt.datetime
    updated_at: dt.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class StatusIn(BaseModel):
    status: BookingState


class CheckoutOut(BaseModel):
    """Schema for a settled checkout (response)."""

    transaction: TransactionOut
    bookings: List[BookingStatusOut]
    settlement: SettlementOut


class ReportSummaryOut(BaseModel):
    total_revenue: int
    today_revenue: int
    total_transactions: int
    today_transactions: int
    studio_sessions: int
    products_sold: int

    model_config = ConfigDict(from_attributes=True)
