from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)

    # снимок позиции меню: без FK, удаление блюда не затрагивает историю заказов
    item_id = Column(String(64), nullable=False)
    item_name = Column(String(128), nullable=False)
    image_url = Column(String(512), nullable=False, default="")
    variant_name = Column(String(64), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # фиксируется на момент заказа
    quantity = Column(Integer, nullable=False, default=1)

    # связи
    order = relationship("Order", back_populates="items")
