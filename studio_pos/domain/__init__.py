from studio_pos.domain.cart import Cart, StudioBookingForm
from studio_pos.domain.catalog import Catalog, Product, TimeSlot, default_catalog
from studio_pos.domain.models import (
    BookingDetails,
    BookingState,
    BookingStatus,
    CartItem,
    ItemKind,
    Operator,
    PaymentMethod,
    PaymentType,
    Transaction,
)
from studio_pos.domain.payment import CustomerContext, PaymentForm, PaymentPolicy, Settlement

__all__ = [
    "BookingDetails",
    "BookingState",
    "BookingStatus",
    "Cart",
    "CartItem",
    "Catalog",
    "CustomerContext",
    "ItemKind",
    "Operator",
    "PaymentForm",
    "PaymentMethod",
    "PaymentPolicy",
    "PaymentType",
    "Product",
    "Settlement",
    "StudioBookingForm",
    "TimeSlot",
    "Transaction",
    "default_catalog",
]
