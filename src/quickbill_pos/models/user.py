import enum
from sqlalchemy import Column, Integer, String, DateTime, func, Enum
from sqlalchemy.orm import relationship
from ..db.base import Base


class RoleEnum(str, enum.Enum):
    admin = "admin"
    staff = "staff"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    password_hash = Column(String(128), nullable=False)
    role = Column(Enum(RoleEnum, name="user_role"), nullable=False, default=RoleEnum.staff)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # связи
    orders = relationship("Order", back_populates="user")
    menu_items = relationship("MenuItem", back_populates="user")
    profile = relationship("Profile", back_populates="user", uselist=False)
