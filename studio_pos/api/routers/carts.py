#studio_pos/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio_pos.api.deps import get_catalog, get_current_operator, get_store
from studio_pos.api.errors import to_http
from studio_pos.data.database import get_db
from studio_pos.domain.cart import StudioBookingForm
from studio_pos.domain.catalog import Catalog
from studio_pos.domain.errors import DomainError
from studio_pos.domain.models import Operator
from studio_pos.domain.schemas import CartOut, ProductIn, QuantityIn, StudioItemsIn
from studio_pos.repos.sql_store import SqlStudioStore
from studio_pos.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(
    db: Session = Depends(get_db),
    store: SqlStudioStore = Depends(get_store),
    catalog: Catalog = Depends(get_catalog),
) -> CartService:
    return CartService(db=db, store=store, catalog=catalog)


@router.post("/", response_model=CartOut)
def open_cart(
    operator: Operator = Depends(get_current_operator),
    svc: CartService = Depends(get_service),
):
    return svc.open_cart(operator.id)


@router.get("/{cart_id}", response_model=CartOut)
def get_cart(
    cart_id: int,
    operator: Operator = Depends(get_current_operator),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.get_cart(cart_id, operator.id)
    except DomainError as e:
        raise to_http(e)


@router.post("/{cart_id}/studio", response_model=CartOut)
def add_studio_items(
    cart_id: int,
    payload: StudioItemsIn,
    operator: Operator = Depends(get_current_operator),
    svc: CartService = Depends(get_service),
):
    form = StudioBookingForm(
        date=payload.date,
        selected_times=tuple(payload.selected_times),
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        notes=payload.notes,
    )
    try:
        return svc.add_studio_items(operator.id, cart_id, form)
    except DomainError as e:
        raise to_http(e)


@router.post("/{cart_id}/products", response_model=CartOut)
def add_product(
    cart_id: int,
    payload: ProductIn,
    operator: Operator = Depends(get_current_operator),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_product(operator.id, cart_id, payload.product_id)
    except DomainError as e:
        raise to_http(e)


@router.patch("/{cart_id}/items/{item_id}", response_model=CartOut)
def update_quantity(
    cart_id: int,
    item_id: str,
    payload: QuantityIn,
    operator: Operator = Depends(get_current_operator),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_quantity(operator.id, cart_id, item_id, payload.quantity)
    except DomainError as e:
        raise to_http(e)


@router.delete("/{cart_id}/items/{item_id}", response_model=CartOut)
def remove_item(
    cart_id: int,
    item_id: str,
    operator: Operator = Depends(get_current_operator),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.remove_item(operator.id, cart_id, item_id)
    except DomainError as e:
        raise to_http(e)


@router.delete("/{cart_id}/items", response_model=CartOut)
def clear_cart(
    cart_id: int,
    operator: Operator = Depends(get_current_operator),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.clear_cart(operator.id, cart_id)
    except DomainError as e:
        raise to_http(e)
