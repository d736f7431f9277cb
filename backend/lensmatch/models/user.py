from sqlalchemy import Column, Integer, String, Boolean, Enum, DateTime, func
from sqlalchemy.orm import relationship
import enum
from ..database import Base


class Role(str, enum.Enum):
    CUSTOMER = "customer"
    PHOTOGRAPHER = "photographer"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    # NULL for users created from an external token
    password_hash = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)

    role = Column(Enum(Role), nullable=False, default=Role.CUSTOMER)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    photographer = relationship("Photographer", back_populates="user", uselist=False)
    customer_bookings = relationship("Booking", foreign_keys="Booking.customer_id", back_populates="customer")

    @property
    def display_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p).strip()
        return name or self.email
