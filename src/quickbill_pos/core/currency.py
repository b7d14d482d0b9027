"""
Валюты отображения.
Все суммы хранятся в базовой валюте (INR); пересчёт делается только для показа.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Union

from quickbill_pos.errors import ValidationError


CENT = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    rate: Decimal  # курс относительно INR


INR = Currency("INR", "₹", Decimal("1"))

CURRENCIES: Dict[str, Currency] = {
    c.code: c
    for c in (
        INR,
        Currency("USD", "$", Decimal("0.012")),
        Currency("EUR", "€", Decimal("0.011")),
        Currency("GBP", "£", Decimal("0.0095")),
    )
}

BASE_CURRENCY = INR


def to_decimal(value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # через str, чтобы 0.1 не превращался в 0.1000000000000000055...
    return Decimal(str(value))


def get_currency(code: str) -> Currency:
    try:
        return CURRENCIES[code.upper()]
    except (KeyError, AttributeError):
        raise ValidationError(f"Unsupported currency: {code}")


def convert(amount: Amount, currency: Currency) -> Decimal:
    return to_decimal(amount) * to_decimal(currency.rate)


def display(amount: Amount, currency: Currency = BASE_CURRENCY) -> str:
    """Сумма в валюте отображения, ровно 2 знака после запятой."""
    return str(convert(amount, currency).quantize(CENT, rounding=ROUND_HALF_UP))


def format_money(amount: Amount, currency: Currency = BASE_CURRENCY) -> str:
    return f"{currency.symbol}{display(amount, currency)}"
