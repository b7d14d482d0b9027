from .user import User, RoleEnum
from .menu_item import MenuItem, MenuItemVariant
from .order import Order, PaymentMethodEnum
from .order_item import OrderItem
from .profile import Profile
from .log import Log, LogLevelEnum

__all__ = [
    "User",
    "RoleEnum",
    "MenuItem",
    "MenuItemVariant",
    "Order",
    "PaymentMethodEnum",
    "OrderItem",
    "Profile",
    "Log",
    "LogLevelEnum",
]
