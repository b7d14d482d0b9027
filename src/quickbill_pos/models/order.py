import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base


class PaymentMethodEnum(str, enum.Enum):
    cash = "cash"
    upi = "upi"
    card = "card"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    customer_name = Column(String(128), nullable=False, default="")
    customer_mobile = Column(String(32), nullable=False, default="")

    # суммы в базовой валюте, фиксируются при сохранении и больше не пересчитываются
    subtotal = Column(Numeric(12, 4), nullable=False)
    tax = Column(Numeric(12, 4), nullable=True)  # у старых заказов может отсутствовать
    tax_rate = Column(Numeric(6, 4), nullable=True)
    total = Column(Numeric(12, 4), nullable=False)

    # валюта на момент заказа
    currency_code = Column(String(3), nullable=True)
    currency_symbol = Column(String(8), nullable=True)
    currency_rate = Column(Numeric(12, 6), nullable=True)

    payment_method = Column(SAEnum(PaymentMethodEnum, name="payment_method"), nullable=False)
    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    # связи
    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
