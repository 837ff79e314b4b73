from sqlalchemy import Column, Integer, ForeignKey, String, JSON
from sqlalchemy.orm import relationship

from studio_pos.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(String(32), primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    item_type = Column(String, nullable=False)  # studio, product
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    details = Column(JSON, nullable=True)

    cart = relationship("CartModel", back_populates="items")
