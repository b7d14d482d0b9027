from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..db.base import Base


DEFAULT_PROFILE_TAX_RATE = Decimal("0.18")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    restaurant_name = Column(String(128), nullable=False, default="QuickBill Restaurant")
    address = Column(String(256), nullable=False, default="123 Foodie Lane, Gourmet City")
    phone = Column(String(32), nullable=False, default="N/A")
    logo_url = Column(String(512), nullable=False, default="")
    tax_rate = Column(Numeric(6, 4), nullable=False, default=DEFAULT_PROFILE_TAX_RATE)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="profile")
