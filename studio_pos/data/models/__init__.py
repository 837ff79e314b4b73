#import all models so SQLAlchemy registers them in Base.metadata

from studio_pos.data.models.user import UserModel
from studio_pos.data.models.cart import CartModel
from studio_pos.data.models.cart_item import CartItemModel
from studio_pos.data.models.transaction import TransactionModel
from studio_pos.data.models.transaction_item import TransactionItemModel
from studio_pos.data.models.booking_status import BookingStatusModel

__all__ = [
    "UserModel",
    "CartModel",
    "CartItemModel",
    "TransactionModel",
    "TransactionItemModel",
    "BookingStatusModel",
]
