"""Payment validation and settlement arithmetic.

All amounts are integers in the smallest currency unit.
"""

from dataclasses import dataclass

from studio_pos.domain.cart import Cart
from studio_pos.domain.errors import ValidationFailed
from studio_pos.domain.models import PaymentMethod, PaymentType
from studio_pos.utils.settings import DP_MINIMUM

DEFAULT_CUSTOMER_NAME = "Customer"


@dataclass(frozen=True)
class PaymentForm:
    method: PaymentMethod = PaymentMethod.CASH
    type: PaymentType = PaymentType.FULL
    amount_paid: int | None = None
    dp_amount: int | None = None


@dataclass(frozen=True)
class CustomerContext:
    """Customer entered for a sale that has no studio booking."""

    name: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class PaymentPolicy:
    dp_minimum: int = DP_MINIMUM


@dataclass(frozen=True)
class Settlement:
    total: int
    amount_paid: int
    change: int
    dp_amount: int | None = None
    remaining_amount: int | None = None


def validate_payment(
    cart: Cart,
    form: PaymentForm,
    customer: CustomerContext,
    policy: PaymentPolicy = PaymentPolicy(),
) -> None:
    """Check a proposed payment against the cart total.

    Raises:
        ValidationFailed: with ``payment`` for amount rules and
            ``customer`` when a product-only sale has no customer name.
    """
    errors: dict[str, str] = {}
    total = cart.total()

    if form.type is PaymentType.DP:
        dp_amount = form.dp_amount or 0
        if dp_amount < policy.dp_minimum:
            errors["payment"] = f"Deposit must be at least {policy.dp_minimum}"
        elif dp_amount >= total:
            errors["payment"] = "Deposit must be less than the total"
    elif form.method is PaymentMethod.CASH:
        if (form.amount_paid or 0) < total:
            errors["payment"] = "Amount paid is less than the total"

    if not cart.studio_items and cart.product_items:
        if not customer.name or not customer.name.strip():
            errors["customer"] = "Customer name is required for product sales"

    if errors:
        raise ValidationFailed(errors)


def compute_settlement(total: int, form: PaymentForm) -> Settlement:
    """Derive paid, change and remaining amounts for a validated payment."""
    if form.type is PaymentType.DP:
        return Settlement(
            total=total,
            amount_paid=form.dp_amount,
            change=0,
            dp_amount=form.dp_amount,
            remaining_amount=total - form.dp_amount,
        )

    if form.method is PaymentMethod.CASH:
        amount_paid = form.amount_paid
    else:
        # qris and transfer are always exact
        amount_paid = total

    return Settlement(total=total, amount_paid=amount_paid, change=amount_paid - total)


def resolve_customer(cart: Cart, customer: CustomerContext) -> tuple[str, str | None]:
    """Name and phone for the transaction: first studio booking wins."""
    studio_items = cart.studio_items
    if studio_items:
        details = studio_items[0].details
        return details.customer_name or DEFAULT_CUSTOMER_NAME, details.customer_phone

    name = (customer.name or "").strip() or DEFAULT_CUSTOMER_NAME
    phone = (customer.phone or "").strip() or None
    return name, phone
