from datetime import date
from typing import Any, Callable, Dict

from sqlalchemy.orm import Session

from studio_pos.data.models.cart import CartModel
from studio_pos.domain.cart import Cart, StudioBookingForm
from studio_pos.domain.catalog import Catalog
from studio_pos.domain.errors import (
    CartAccessDeniedError,
    CartClosedError,
    CartConflictError,
    CartNotFoundError,
    ProductNotFoundError,
    ValidationFailed,
)
from studio_pos.domain.models import CartItem
from studio_pos.repos.cart_repo import CartRepo
from studio_pos.repos.interfaces import StudioStore
from studio_pos.repos.sql_store import item_from_row
from studio_pos.utils import clock
from studio_pos.utils.logging import get_logger

logger = get_logger(__name__)


def item_view(item: CartItem) -> Dict[str, Any]:
    details = None
    if item.details is not None:
        d = item.details
        details = {
            "date": d.date,
            "start_time": d.start_time,
            "end_time": d.end_time,
            "customer_name": d.customer_name,
            "customer_phone": d.customer_phone,
            "notes": d.notes,
        }
    return {
        "id": item.id,
        "type": item.kind.value,
        "name": item.name,
        "price": item.price,
        "quantity": item.quantity,
        "line_total": item.line_total,
        "details": details,
    }


class CartService:
    """
    Use cases of the draft cart, split CQRS style:
    commands (open, add, update, remove, clear) change state,
    query (get) only reads.
    Every command bumps the cart version (optimistic locking).
    """

    def __init__(
        self,
        db: Session,
        store: StudioStore,
        catalog: Catalog,
        today: Callable[[], date] = clock.today,
    ):
        self.repo = CartRepo(db)
        self.store = store
        self.catalog = catalog
        self.today = today

    def load(self, cart_id: int, user_id: int) -> tuple[CartModel, Cart]:
        cart = self.repo.get_cart(cart_id)

        if not cart:
            raise CartNotFoundError(cart_id)

        if cart.user_id != user_id:
            raise CartAccessDeniedError()

        rows = self.repo.get_cart_items(cart_id)
        return cart, Cart(self.catalog, [item_from_row(r) for r in rows])

    def _load_active(self, cart_id: int, user_id: int) -> tuple[CartModel, Cart]:
        model, cart = self.load(cart_id, user_id)
        if model.status != "ACTIVE":
            raise CartClosedError()
        return model, cart

    def _save(
        self, model: CartModel, cart: Cart, expected_version: int | None = None, **new_data
    ) -> None:
        #compare against the version read at load time, model may have been reloaded since
        version = model.version if expected_version is None else expected_version
        self.repo.replace_items(model.id, cart.items)

        rowcount = self.repo.update_cart_version(
            cart_id=model.id,
            old_version=version,
            new_data={"version": version + 1, **new_data},
        )

        #0 rows affected = somebody else wrote this cart in between
        if rowcount == 0:
            self.repo.rollback()
            raise CartConflictError()

        self.repo.commit()
        logger.info(f"Cart {model.id} saved, new version: {version + 1}")

    def _view(self, model: CartModel, cart: Cart) -> Dict[str, Any]:
        return {
            "cart_id": model.id,
            "user_id": model.user_id,
            "status": model.status,
            "items": [item_view(i) for i in cart.items],
            "total": cart.total(),
        }

    #query
    def get_cart(self, cart_id: int, user_id: int) -> Dict[str, Any]:
        model, cart = self.load(cart_id, user_id)
        return self._view(model, cart)

    #commands
    def open_cart(self, user_id: int) -> Dict[str, Any]:
        #an operator works on one active cart at a time
        existing = self.repo.get_active_cart_by_user(user_id)

        if existing:
            logger.info(f"Operator {user_id} already has active cart {existing.id}")
            return self.get_cart(existing.id, user_id)

        created = self.repo.create_cart(CartModel(user_id=user_id, status="ACTIVE", version=1))
        logger.info(f"Opened cart {created.id} for operator {user_id}")
        return self._view(created, Cart(self.catalog))

    def add_studio_items(
        self, user_id: int, cart_id: int, form: StudioBookingForm
    ) -> Dict[str, Any]:
        model, cart = self._load_active(cart_id, user_id)

        # snapshot of live bookings, checked again at checkout
        bookings = self.store.list_bookings(form.date) if form.date else []
        try:
            added = cart.add_studio_items(form, bookings, self.today())
        except ValidationFailed as e:
            logger.info(f"Studio booking rejected for cart {cart_id}: {e.errors}")
            raise

        self._save(model, cart)
        logger.info(
            f"Added {len(added)} studio session(s) on {form.date} to cart {cart_id}: "
            f"{', '.join(i.details.start_time for i in added)}"
        )
        return self._view(model, cart)

    def add_product(self, user_id: int, cart_id: int, product_id: str) -> Dict[str, Any]:
        product = self.catalog.product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        model, cart = self._load_active(cart_id, user_id)
        item = cart.add_product(product)

        self._save(model, cart)
        logger.info(f"Product {product.name} in cart {cart_id}, quantity {item.quantity}")
        return self._view(model, cart)

    def update_quantity(
        self, user_id: int, cart_id: int, item_id: str, quantity: int
    ) -> Dict[str, Any]:
        model, cart = self._load_active(cart_id, user_id)
        cart.update_quantity(item_id, quantity)

        self._save(model, cart)
        return self._view(model, cart)

    def remove_item(self, user_id: int, cart_id: int, item_id: str) -> Dict[str, Any]:
        model, cart = self._load_active(cart_id, user_id)

        if cart.remove(item_id):
            logger.info(f"Removed item {item_id} from cart {cart_id}")
            self._save(model, cart)
        return self._view(model, cart)

    def clear_cart(self, user_id: int, cart_id: int) -> Dict[str, Any]:
        # nothing has been written anywhere else yet, so discarding is always safe
        model, cart = self._load_active(cart_id, user_id)
        cart.clear()

        self._save(model, cart)
        logger.info(f"Cart {cart_id} cleared")
        return self._view(model, cart)

    def close_after_checkout(self, model: CartModel, cart: Cart, loaded_version: int) -> None:
        cart.clear()
        self._save(model, cart, expected_version=loaded_version, status="CHECKED_OUT")
