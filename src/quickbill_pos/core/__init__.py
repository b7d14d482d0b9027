from .currency import Currency, CURRENCIES, BASE_CURRENCY, display, format_money, get_currency
from .pricing import (
    CatalogItem,
    OrderLine,
    OrderLineAccumulator,
    Totals,
    Variant,
    compute_totals,
    resolve_tax_rate,
)
from .checkout import CheckoutState, Customer, OrderDraft, Register
from .export import orders_to_csv

__all__ = [
    "Currency",
    "CURRENCIES",
    "BASE_CURRENCY",
    "display",
    "format_money",
    "get_currency",
    "CatalogItem",
    "OrderLine",
    "OrderLineAccumulator",
    "Totals",
    "Variant",
    "compute_totals",
    "resolve_tax_rate",
    "CheckoutState",
    "Customer",
    "OrderDraft",
    "Register",
    "orders_to_csv",
]
