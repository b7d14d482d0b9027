"""
Касса: сборка заказа и подтверждение оплаты.

Состояния: building -> awaiting_payment -> saved -> (снова пустой) building.
Менять заказ можно только в состоянии building.
"""
import enum
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from quickbill_pos.core.currency import BASE_CURRENCY, Currency, display, get_currency
from quickbill_pos.core.pricing import (
    CatalogItem,
    OrderLine,
    OrderLineAccumulator,
    Totals,
    Variant,
    compute_totals,
    resolve_tax_rate,
)
from quickbill_pos.errors import ValidationError
from quickbill_pos.models.order import PaymentMethodEnum

logger = logging.getLogger(__name__)


class CheckoutState(str, enum.Enum):
    building = "building"
    awaiting_payment = "awaiting_payment"
    saved = "saved"


@dataclass
class Customer:
    name: str = ""
    mobile: str = ""


@dataclass(frozen=True)
class OrderDraft:
    customer: Customer
    lines: Tuple[OrderLine, ...]
    totals: Totals
    currency: Currency
    payment_method: PaymentMethodEnum

    def to_payload(self) -> Dict[str, Any]:
        """Тело запроса POST /orders."""
        return {
            "customer": {"name": self.customer.name, "mobile": self.customer.mobile},
            "items": [
                {
                    "item_id": line.item_id,
                    "item_name": line.item_name,
                    "image_url": line.image_url,
                    "variant": {
                        "name": line.selected_variant.name,
                        "price": str(line.selected_variant.price),
                    },
                    "quantity": line.quantity,
                }
                for line in self.lines
                if line.selected_variant is not None
            ],
            "currency_code": self.currency.code,
            "payment_method": self.payment_method.value,
            "tax_included": self.totals.tax_included,
        }


OrderStore = Callable[[OrderDraft], Awaitable[Any]]


class Register:
    def __init__(
        self,
        store: OrderStore,
        tax_rate: Optional[Decimal] = None,
        currency: Currency = BASE_CURRENCY,
    ):
        self._store = store
        self.lines = OrderLineAccumulator()
        self.customer = Customer()
        self.currency = currency
        self.tax_rate = resolve_tax_rate(tax_rate)
        self.tax_included = False
        self.state = CheckoutState.building
        self.last_order: Any = None
        self._saving = False

    def _ensure_building(self) -> None:
        if self.state is not CheckoutState.building:
            raise ValidationError("Order cannot be changed while awaiting payment")

    # --- сборка заказа ---

    def add_line(self, item: CatalogItem, variant: Optional[Variant]) -> OrderLine:
        self._ensure_building()
        return self.lines.add_line(item, variant)

    def set_quantity(self, item_id: str, variant_name: str, quantity: int) -> None:
        self._ensure_building()
        self.lines.set_quantity(item_id, variant_name, quantity)

    def set_customer(self, name: Optional[str] = None, mobile: Optional[str] = None) -> None:
        self._ensure_building()
        if name is not None:
            self.customer.name = name
        if mobile is not None:
            self.customer.mobile = mobile

    def set_currency(self, code: str) -> Currency:
        self._ensure_building()
        self.currency = get_currency(code)
        logger.info("Currency changed to %s", self.currency.code)
        return self.currency

    def set_tax_included(self, included: bool) -> None:
        self._ensure_building()
        self.tax_included = included

    def toggle_tax(self) -> bool:
        self.set_tax_included(not self.tax_included)
        return self.tax_included

    def set_tax_rate(self, tax_rate: Optional[Decimal]) -> None:
        self._ensure_building()
        self.tax_rate = resolve_tax_rate(tax_rate)

    def clear(self) -> None:
        self._ensure_building()
        self.lines.clear()
        self.customer = Customer()

    # --- суммы ---

    @property
    def totals(self) -> Totals:
        return compute_totals(self.lines, self.tax_rate, self.tax_included)

    def display_totals(self) -> Dict[str, str]:
        totals = self.totals
        return {
            "subtotal": display(totals.subtotal, self.currency),
            "tax": display(totals.tax, self.currency),
            "total": display(totals.total, self.currency),
        }

    # --- оплата ---

    @property
    def is_saving(self) -> bool:
        return self._saving

    def proceed_to_payment(self) -> None:
        self._ensure_building()
        if not self.customer.name or not self.customer.mobile:
            raise ValidationError("Please enter customer name and mobile number.")
        if self.lines.is_empty():
            raise ValidationError("Cannot save an empty order.")
        self.state = CheckoutState.awaiting_payment

    def cancel_payment(self) -> None:
        if self._saving:
            raise ValidationError("Order is already being saved")
        if self.state is CheckoutState.awaiting_payment:
            self.state = CheckoutState.building

    def draft(self, payment_method: PaymentMethodEnum) -> OrderDraft:
        return OrderDraft(
            customer=Customer(self.customer.name, self.customer.mobile),
            lines=tuple(self.lines),
            totals=self.totals,
            currency=self.currency,
            payment_method=payment_method,
        )

    async def confirm_payment(self, payment_method: str) -> Any:
        if self._saving:
            raise ValidationError("Order is already being saved")
        if self.state is not CheckoutState.awaiting_payment:
            raise ValidationError("Proceed to payment before confirming")
        try:
            method = PaymentMethodEnum(payment_method)
        except ValueError:
            raise ValidationError(f"Invalid payment method: {payment_method}")

        draft = self.draft(method)
        self._saving = True
        try:
            saved = await self._store(draft)
        except Exception:
            # остаёмся в awaiting_payment, оператор повторит сам
            logger.error("Could not save the order", exc_info=True)
            raise
        finally:
            self._saving = False

        self.state = CheckoutState.saved
        self.last_order = saved
        logger.info("Order saved, payment_method=%s total=%s", method.value, draft.totals.total)
        self._reset()
        return saved

    def _reset(self) -> None:
        self.lines.clear()
        self.customer = Customer()
        self.tax_included = False
        self.state = CheckoutState.building
