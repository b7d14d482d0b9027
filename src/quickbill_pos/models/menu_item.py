from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from ..db.base import Base


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(128), nullable=False)
    image_url = Column(String(512), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # связи
    user = relationship("User", back_populates="menu_items")
    variants = relationship(
        "MenuItemVariant",
        back_populates="menu_item",
        order_by="MenuItemVariant.position",
        cascade="all, delete-orphan",
    )


class MenuItemVariant(Base):
    __tablename__ = "menu_item_variants"
    __table_args__ = (UniqueConstraint("menu_item_id", "name", name="uq_menu_item_variant_name"),)

    id = Column(Integer, primary_key=True, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(64), nullable=False)  # Half, Full и т.д.
    price = Column(Numeric(10, 2), nullable=False)  # в базовой валюте (INR)

    menu_item = relationship("MenuItem", back_populates="variants")
