# studio_pos/repos/cart_repo.py
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from studio_pos.data.models.cart import CartModel
from studio_pos.data.models.cart_item import CartItemModel
from studio_pos.domain.models import CartItem
from studio_pos.repos.sql_store import details_to_json


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_active_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id, CartModel.status == "ACTIVE")
            .order_by(CartModel.id.desc())
        ).scalars().first()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.position)
            ).scalars().all()
        )

    def replace_items(self, cart_id: int, items: Sequence[CartItem]) -> None:
        """Make the stored rows match ``items``; caller commits."""
        existing = {row.id: row for row in self.get_cart_items(cart_id)}

        for position, item in enumerate(items):
            row = existing.pop(item.id, None)
            if row is None:
                row = CartItemModel(id=item.id, cart_id=cart_id)
                self.db.add(row)
            row.position = position
            row.item_type = item.kind.value
            row.name = item.name
            row.price = item.price
            row.quantity = item.quantity
            row.details = details_to_json(item.details)

        for row in existing.values():
            self.db.delete(row)

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        #UPDATE carts SET version = v+1 WHERE id = ? AND version = v
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
