from pydantic import BaseModel, Field, conint, field_validator
from typing import Any, List, Optional
from datetime import datetime
from decimal import Decimal

from quickbill_pos.core.currency import BASE_CURRENCY
from quickbill_pos.models.order import PaymentMethodEnum


class CustomerIn(BaseModel):
    name: str = Field("", max_length=128)
    mobile: str = Field("", max_length=32)


class CurrencyOut(BaseModel):
    code: str
    symbol: str
    rate: Decimal


class VariantSnapshot(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class OrderItemCreate(BaseModel):
    item_id: str = Field(..., min_length=1)
    item_name: str = Field(..., min_length=1)
    image_url: str = ""
    variant: VariantSnapshot
    quantity: conint(ge=1)

    @field_validator("item_id", mode="before")
    @classmethod
    def item_id_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class OrderCreate(BaseModel):
    customer: CustomerIn = CustomerIn()
    items: List[OrderItemCreate] = Field(..., min_length=1)
    currency_code: str = BASE_CURRENCY.code
    payment_method: PaymentMethodEnum
    tax_included: bool = False


class OrderItemRead(BaseModel):
    id: int
    item_id: str
    item_name: str
    image_url: str
    variant_name: str
    price: Decimal
    quantity: int

    class Config:
        from_attributes = True


class OrderRead(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    customer: CustomerIn
    items: List[OrderItemRead] = []
    subtotal: Decimal
    tax: Decimal
    tax_rate: Optional[Decimal] = None
    total: Decimal
    currency: CurrencyOut
    payment_method: PaymentMethodEnum
    date: datetime

    @classmethod
    def from_orm_order(cls, order, with_username: bool = False):
        """
        Сборка ответа из строки orders.
        Старые заказы без налога и валюты дополняются значениями по умолчанию здесь,
        а не у каждого потребителя.
        """
        currency = CurrencyOut(
            code=order.currency_code or BASE_CURRENCY.code,
            symbol=order.currency_symbol or BASE_CURRENCY.symbol,
            rate=order.currency_rate if order.currency_rate is not None else BASE_CURRENCY.rate,
        )
        return cls(
            id=order.id,
            user_id=order.user_id,
            username=order.user.username if with_username and order.user else None,
            customer=CustomerIn(name=order.customer_name or "", mobile=order.customer_mobile or ""),
            items=[OrderItemRead.model_validate(i) for i in order.items],
            subtotal=order.subtotal,
            tax=order.tax if order.tax is not None else Decimal("0"),
            tax_rate=order.tax_rate,
            total=order.total,
            currency=currency,
            payment_method=order.payment_method,
            date=order.date,
        )


class OrderCount(BaseModel):
    count: int
