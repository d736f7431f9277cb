from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Table, func
from sqlalchemy.orm import relationship
from ..database import Base


photographer_categories = Table(
    "photographer_categories",
    Base.metadata,
    Column("photographer_id", Integer, ForeignKey("photographers.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)

    photographers = relationship("Photographer", secondary=photographer_categories, back_populates="categories")


class Photographer(Base):
    __tablename__ = "photographers"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    bio = Column(Text, default="")
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    # minor currency units
    base_rate = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="photographer")
    categories = relationship("Category", secondary=photographer_categories, back_populates="photographers")
    portfolio = relationship("PortfolioItem", back_populates="photographer", order_by="PortfolioItem.id")
    slots = relationship("AvailabilitySlot", back_populates="photographer")
    bookings = relationship("Booking", back_populates="photographer")


class PortfolioItem(Base):
    __tablename__ = "portfolio_items"

    id = Column(Integer, primary_key=True)
    photographer_id = Column(Integer, ForeignKey("photographers.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String, nullable=False)
    caption = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    photographer = relationship("Photographer", back_populates="portfolio")
