from sqlalchemy import Column, Integer, Enum, ForeignKey, Text, String, Date, DateTime, func
from sqlalchemy.orm import relationship
import enum
from ..database import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True)

    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    photographer_id = Column(Integer, ForeignKey("photographers.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    date = Column(Date, nullable=False)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    location = Column(Text, nullable=True)
    notes = Column(Text, default="")

    # minor currency units, fixed at creation
    total_amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="usd")
    status = Column(Enum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    payment_intent_id = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("User", foreign_keys=[customer_id], back_populates="customer_bookings")
    photographer = relationship("Photographer", back_populates="bookings")
    category = relationship("Category")
    review = relationship("Review", back_populates="booking", uselist=False)
