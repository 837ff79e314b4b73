from sqlalchemy import Column, ForeignKey, String, DateTime, Date, Index, text

from studio_pos.data.database import Base


class BookingStatusModel(Base):
    __tablename__ = "booking_statuses"

    id = Column(String(32), primary_key=True)
    transaction_id = Column(String(32), ForeignKey("transactions.id"), nullable=False, index=True)

    booking_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    status = Column(String, nullable=False, default="on_process")  # on_process, done
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    # one live booking per slot; done bookings free the slot again
    __table_args__ = (
        Index(
            "uq_booking_slot_on_process",
            "booking_date",
            "start_time",
            unique=True,
            sqlite_where=text("status = 'on_process'"),
            postgresql_where=text("status = 'on_process'"),
        ),
    )
