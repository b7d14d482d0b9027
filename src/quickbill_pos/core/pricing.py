"""
Позиции текущего заказа и расчёт сумм.

Строка заказа уникальна по паре (id блюда, название варианта).
Цена варианта копируется в строку в момент добавления, поэтому
последующее изменение меню не влияет ни на открытый, ни на сохранённый заказ.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Iterator, List, Optional, Tuple

from quickbill_pos.core.currency import Amount, to_decimal
from quickbill_pos.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.05")


@dataclass(frozen=True)
class Variant:
    name: str
    price: Decimal


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    variants: Tuple[Variant, ...] = ()
    image_url: str = ""

    def variant(self, name: str) -> Optional[Variant]:
        for v in self.variants:
            if v.name == name:
                return v
        return None


@dataclass
class OrderLine:
    item_id: str
    item_name: str
    quantity: int
    selected_variant: Optional[Variant]
    image_url: str = ""

    @property
    def key(self) -> Tuple[str, Optional[str]]:
        return self.item_id, self.selected_variant.name if self.selected_variant else None

    @property
    def line_total(self) -> Decimal:
        return self.selected_variant.price * self.quantity


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    tax_rate: Decimal
    tax_included: bool


class OrderLineAccumulator:
    def __init__(self, lines: Iterable[OrderLine] = ()):
        self._lines: List[OrderLine] = list(lines)

    def __iter__(self) -> Iterator[OrderLine]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> List[OrderLine]:
        return list(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def find(self, item_id: str, variant_name: str) -> Optional[OrderLine]:
        for line in self._lines:
            if line.key == (item_id, variant_name):
                return line
        return None

    def add_line(self, item: CatalogItem, variant: Optional[Variant]) -> OrderLine:
        if variant is None:
            raise ValidationError(f"Please select a variant for {item.name}")

        line = self.find(item.id, variant.name)
        if line:
            line.quantity += 1
            return line

        line = OrderLine(
            item_id=item.id,
            item_name=item.name,
            quantity=1,
            # копия значения, а не ссылка на вариант из меню
            selected_variant=Variant(name=variant.name, price=to_decimal(variant.price)),
            image_url=item.image_url,
        )
        self._lines.append(line)
        return line

    def set_quantity(self, item_id: str, variant_name: str, quantity: int) -> None:
        if quantity <= 0:
            self._lines = [line for line in self._lines if line.key != (item_id, variant_name)]
            return

        line = self.find(item_id, variant_name)
        if line:
            line.quantity = quantity

    def clear(self) -> None:
        self._lines = []


def resolve_tax_rate(profile_rate: Optional[Amount], default: Amount = DEFAULT_TAX_RATE) -> Decimal:
    if profile_rate is None:
        return to_decimal(default)
    return to_decimal(profile_rate)


def compute_subtotal(lines: Iterable[OrderLine]) -> Decimal:
    subtotal = Decimal("0")
    for line in lines:
        if line.selected_variant is None:
            logger.warning(
                "Order line without selected variant skipped: item_id=%s quantity=%s",
                line.item_id, line.quantity,
            )
            continue
        subtotal += line.line_total
    return subtotal


def compute_totals(lines: Iterable[OrderLine], tax_rate: Amount, tax_included: bool) -> Totals:
    """
    subtotal = сумма(цена варианта * количество)
    tax = subtotal * ставка, только если налог включён оператором
    total = subtotal + tax
    Округление не делается, только при отображении.
    """
    rate = to_decimal(tax_rate)
    subtotal = compute_subtotal(lines)
    tax = subtotal * rate if tax_included else Decimal("0")
    return Totals(
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        tax_rate=rate,
        tax_included=tax_included,
    )
