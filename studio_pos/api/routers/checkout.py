# studio_pos/api/routers/checkout.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio_pos.api.deps import get_catalog, get_current_operator, get_lock_service, get_store
from studio_pos.api.errors import to_http
from studio_pos.api.views import transaction_view
from studio_pos.data.database import get_db
from studio_pos.domain.catalog import Catalog
from studio_pos.domain.errors import DomainError
from studio_pos.domain.models import Operator
from studio_pos.domain.payment import CustomerContext, PaymentForm
from studio_pos.domain.schemas import CheckoutOut, PaymentIn, SettlementOut
from studio_pos.repos.sql_store import SqlStudioStore
from studio_pos.services.checkout_service import CheckoutService

router = APIRouter(prefix="/carts", tags=["checkout"])


def get_service(
    db: Session = Depends(get_db),
    store: SqlStudioStore = Depends(get_store),
    catalog: Catalog = Depends(get_catalog),
    lock_service=Depends(get_lock_service),
) -> CheckoutService:
    return CheckoutService(db=db, store=store, catalog=catalog, lock_service=lock_service)


def _form(payload: PaymentIn) -> tuple[PaymentForm, CustomerContext]:
    form = PaymentForm(
        method=payload.payment_method,
        type=payload.payment_type,
        amount_paid=payload.amount_paid,
        dp_amount=payload.dp_amount,
    )
    return form, CustomerContext(name=payload.customer_name, phone=payload.customer_phone)


@router.post("/{cart_id}/checkout/validate", response_model=SettlementOut)
def validate_payment(
    cart_id: int,
    payload: PaymentIn,
    operator: Operator = Depends(get_current_operator),
    svc: CheckoutService = Depends(get_service),
):
    """
    Checks the payment without writing anything and previews
    the amounts a checkout would record.
    """
    form, customer = _form(payload)
    try:
        return svc.validate(cart_id, operator.id, form, customer)
    except DomainError as e:
        raise to_http(e)


@router.post("/{cart_id}/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    cart_id: int,
    payload: PaymentIn,
    operator: Operator = Depends(get_current_operator),
    svc: CheckoutService = Depends(get_service),
):
    """
    Settles the cart: transaction, items and booking statuses.
    """
    form, customer = _form(payload)
    try:
        result = svc.settle(cart_id, operator, form, customer)
    except DomainError as e:
        raise to_http(e)

    return {
        "transaction": transaction_view(result.transaction),
        "bookings": list(result.bookings),
        "settlement": result.settlement,
    }
