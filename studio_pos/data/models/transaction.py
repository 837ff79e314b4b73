from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Date
from sqlalchemy.orm import relationship

from studio_pos.data.database import Base


class TransactionModel(Base):
    __tablename__ = "transactions"

    id = Column(String(32), primary_key=True)

    total = Column(Integer, nullable=False)
    amount_paid = Column(Integer, nullable=False)
    change_amount = Column(Integer, nullable=False, default=0)
    payment_method = Column(String, nullable=False)  # cash, qris, transfer
    payment_type = Column(String, nullable=False)  # full, dp
    dp_amount = Column(Integer, nullable=True)
    remaining_amount = Column(Integer, nullable=True)

    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    # studio-local business day, used for date range filters
    created_on = Column(Date, nullable=False, index=True)

    items = relationship(
        "TransactionItemModel",
        back_populates="transaction",
        order_by="TransactionItemModel.position",
    )
