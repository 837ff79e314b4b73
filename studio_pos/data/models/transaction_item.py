from sqlalchemy import Column, Integer, ForeignKey, String, JSON
from sqlalchemy.orm import relationship

from studio_pos.data.database import Base


class TransactionItemModel(Base):
    __tablename__ = "transaction_items"

    id = Column(String(32), primary_key=True)
    transaction_id = Column(String(32), ForeignKey("transactions.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    item_type = Column(String, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    details = Column(JSON, nullable=True)

    transaction = relationship("TransactionModel", back_populates="items")
