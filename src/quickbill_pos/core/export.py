"""Выгрузка заказов в CSV."""
import csv
import io
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from quickbill_pos.core.currency import Currency, display

CSV_HEADERS = [
    "Order ID",
    "Customer Name",
    "Date",
    "Total Amount",
    "Currency",
    "Tax Collected",
    "Payment Method",
]


def _order_currency(order: Mapping[str, Any]) -> Currency:
    c = order["currency"]
    return Currency(code=c["code"], symbol=c["symbol"], rate=c["rate"])


def _format_date(value: Any) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value.strftime("%Y-%m-%d %H:%M:%S")


def order_row(order: Mapping[str, Any]) -> list:
    # суммы пересчитываются по курсу, сохранённому в заказе, а не по текущему
    currency = _order_currency(order)
    return [
        order["id"],
        order["customer"]["name"],
        _format_date(order["date"]),
        display(order["total"], currency),
        currency.code,
        display(order["tax"], currency),
        order["payment_method"],
    ]


def orders_to_csv(orders: Iterable[Mapping[str, Any]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for order in orders:
        writer.writerow(order_row(order))
    return buf.getvalue()


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"quickbill_orders_{day.isoformat()}.csv"
