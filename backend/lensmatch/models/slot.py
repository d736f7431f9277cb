from sqlalchemy import Column, Integer, Date, String, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base


class AvailabilitySlot(Base):
    __tablename__ = "availability_slots"

    id = Column(Integer, primary_key=True)
    photographer_id = Column(Integer, ForeignKey("photographers.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    # "HH:MM[:SS]", matched as exact strings
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    is_booked = Column(Boolean, nullable=False, default=False)

    photographer = relationship("Photographer", back_populates="slots")

    __table_args__ = (
        UniqueConstraint("photographer_id", "date", "start_time", "end_time", name="uniq_photographer_slot"),
    )
