from decimal import Decimal
from typing import List

from pydantic import BaseModel

from quickbill_pos.schemas.order import OrderRead


class AdminStats(BaseModel):
    user_count: int
    order_count: int
    menu_count: int
    total_revenue: Decimal
    recent_orders: List[OrderRead]
