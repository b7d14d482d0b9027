from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from quickbill_pos.models import Order, OrderItem, PaymentMethodEnum

pytestmark = pytest.mark.anyio


def order_body(**overrides):
    body = {
        "customer": {"name": "Asha", "mobile": "9800000000"},
        "items": [
            {
                "item_id": 1,
                "item_name": "Paneer Tikka",
                "image_url": "https://img.example/paneer.jpg",
                "variant": {"name": "Full", "price": "100"},
                "quantity": 2,
            },
            {
                "item_id": "1",
                "item_name": "Paneer Tikka",
                "image_url": "https://img.example/paneer.jpg",
                "variant": {"name": "Half", "price": "60"},
                "quantity": 1,
            },
        ],
        "currency_code": "INR",
        "payment_method": "upi",
        "tax_included": True,
    }
    body.update(overrides)
    return body


async def test_create_order_computes_totals_with_profile_tax(client, staff_headers):
    resp = await client.post("/orders", json=order_body(), headers=staff_headers)

    assert resp.status_code == 201
    order = resp.json()
    assert Decimal(order["subtotal"]) == Decimal("260")
    assert Decimal(order["tax"]) == Decimal("46.8")
    assert Decimal(order["total"]) == Decimal("306.8")
    assert Decimal(order["tax_rate"]) == Decimal("0.18")
    assert order["currency"]["code"] == "INR"
    assert order["payment_method"] == "upi"
    assert [(i["item_id"], i["variant_name"], i["quantity"]) for i in order["items"]] == [
        ("1", "Full", 2),
        ("1", "Half", 1),
    ]

    fetched = await client.get(f"/orders/{order['id']}", headers=staff_headers)
    assert fetched.status_code == 200
    assert fetched.json()["total"] == order["total"]


async def test_order_without_tax(client, staff_headers):
    order = (await client.post("/orders", json=order_body(tax_included=False), headers=staff_headers)).json()
    assert Decimal(order["tax"]) == Decimal("0")
    assert Decimal(order["total"]) == Decimal("260")


async def test_saved_order_is_frozen(client, staff_headers):
    menu = (
        await client.post(
            "/menu",
            json={
                "name": "Paneer Tikka",
                "image_url": "https://img.example/paneer.jpg",
                "variants": [{"name": "Half", "price": "60"}, {"name": "Full", "price": "100"}],
            },
            headers=staff_headers,
        )
    ).json()
    body = order_body(currency_code="USD")
    for line in body["items"]:
        line["item_id"] = menu["id"]
    order = (await client.post("/orders", json=body, headers=staff_headers)).json()

    await client.put("/profile", json={"tax_rate": "0.05"}, headers=staff_headers)
    await client.put(
        f"/menu/{menu['id']}", json={"variants": [{"name": "Full", "price": "150"}]}, headers=staff_headers
    )
    await client.delete(f"/menu/{menu['id']}", headers=staff_headers)

    again = (await client.get(f"/orders/{order['id']}", headers=staff_headers)).json()
    assert again["subtotal"] == order["subtotal"]
    assert again["tax"] == order["tax"]
    assert again["total"] == order["total"]
    assert again["currency"] == order["currency"]
    assert Decimal(again["currency"]["rate"]) == Decimal("0.012")
    assert [Decimal(i["price"]) for i in again["items"]] == [Decimal("100"), Decimal("60")]

    # следующий заказ уже по новой ставке
    newer = (await client.post("/orders", json=order_body(), headers=staff_headers)).json()
    assert Decimal(newer["tax"]) == Decimal("13")


async def test_orders_are_scoped_to_user(client, staff_headers, other_headers):
    order = (await client.post("/orders", json=order_body(), headers=staff_headers)).json()

    assert (await client.get(f"/orders/{order['id']}", headers=other_headers)).status_code == 404
    assert (await client.get("/orders", headers=other_headers)).json()["total"] == 0
    assert (await client.get("/orders/count", headers=other_headers)).json() == {"count": 0}
    assert (await client.get("/orders/count", headers=staff_headers)).json() == {"count": 1}


async def test_unknown_order_is_404(client, staff_headers):
    assert (await client.get("/orders/999", headers=staff_headers)).status_code == 404


@pytest.mark.parametrize(
    "overrides",
    [
        {"items": []},
        {"currency_code": "JPY"},
        {"payment_method": "cheque"},
    ],
)
async def test_invalid_orders_are_rejected(client, staff_headers, overrides):
    resp = await client.post("/orders", json=order_body(**overrides), headers=staff_headers)
    assert resp.status_code == 400


async def test_duplicate_lines_are_rejected(client, staff_headers):
    body = order_body()
    body["items"][1]["variant"] = {"name": "Full", "price": "100"}
    resp = await client.post("/orders", json=body, headers=staff_headers)
    assert resp.status_code == 400


async def test_zero_quantity_is_rejected(client, staff_headers):
    body = order_body()
    body["items"][0]["quantity"] = 0
    resp = await client.post("/orders", json=body, headers=staff_headers)
    assert resp.status_code == 400


async def test_search_by_name_id_and_total(client, staff_headers):
    asha = (await client.post("/orders", json=order_body(), headers=staff_headers)).json()
    ravi = (
        await client.post(
            "/orders",
            json=order_body(customer={"name": "Ravi", "mobile": "9811111111"}, tax_included=False),
            headers=staff_headers,
        )
    ).json()

    async def search(term):
        page = (await client.get("/orders", params={"search": term}, headers=staff_headers)).json()
        return sorted(o["id"] for o in page["data"])

    assert await search("ash") == [asha["id"]]
    assert await search(str(ravi["id"])) == [ravi["id"]]
    assert await search("306.8") == [asha["id"]]
    assert await search("260.00") == [ravi["id"]]


async def test_payment_filter_and_limit_zero(client, staff_headers):
    for method in ["cash", "upi", "card", "cash"]:
        await client.post("/orders", json=order_body(payment_method=method), headers=staff_headers)

    cash = (await client.get("/orders", params={"payment_filter": "cash"}, headers=staff_headers)).json()
    assert cash["total"] == 2
    assert {o["payment_method"] for o in cash["data"]} == {"cash"}

    paged = (await client.get("/orders", params={"limit": 3}, headers=staff_headers)).json()
    assert len(paged["data"]) == 3
    assert paged["total_pages"] == 2

    everything = (await client.get("/orders", params={"limit": 0}, headers=staff_headers)).json()
    assert len(everything["data"]) == 4
    assert everything["total_pages"] == 1


async def test_date_filters(client, db, staff_user, staff_headers):
    old = Order(
        user_id=staff_user.id,
        customer_name="Old",
        customer_mobile="1",
        subtotal=Decimal("10"),
        tax=Decimal("0"),
        total=Decimal("10"),
        payment_method=PaymentMethodEnum.cash,
        date=datetime.now(timezone.utc) - timedelta(days=10),
        items=[OrderItem(item_id="1", item_name="Tea", variant_name="Cup", price=Decimal("10"), quantity=1)],
    )
    db.add(old)
    await db.commit()
    await client.post("/orders", json=order_body(), headers=staff_headers)

    today = (await client.get("/orders", params={"filter_type": "today"}, headers=staff_headers)).json()
    assert [o["customer"]["name"] for o in today["data"]] == ["Asha"]

    old_day = (datetime.now(timezone.utc) - timedelta(days=10)).date().isoformat()
    single = (
        await client.get(
            "/orders", params={"filter_type": "single", "single_date": old_day}, headers=staff_headers
        )
    ).json()
    assert [o["customer"]["name"] for o in single["data"]] == ["Old"]

    wide = (
        await client.get(
            "/orders",
            params={
                "filter_type": "range",
                "date_start": old_day,
                "date_end": datetime.now(timezone.utc).date().isoformat(),
            },
            headers=staff_headers,
        )
    ).json()
    assert wide["total"] == 2


async def test_legacy_order_without_tax_and_currency(client, db, staff_user, staff_headers):
    legacy = Order(
        user_id=staff_user.id,
        customer_name="Legacy",
        customer_mobile="1",
        subtotal=Decimal("120"),
        tax=None,
        total=Decimal("120"),
        payment_method=PaymentMethodEnum.card,
        date=datetime.now(timezone.utc),
        items=[OrderItem(item_id="9", item_name="Thali", variant_name="Full", price=Decimal("120"), quantity=1)],
    )
    db.add(legacy)
    await db.commit()

    order = (await client.get(f"/orders/{legacy.id}", headers=staff_headers)).json()
    assert Decimal(order["tax"]) == Decimal("0")
    assert order["tax_rate"] is None
    assert order["currency"]["code"] == "INR"
    assert order["currency"]["symbol"] == "₹"
    assert Decimal(order["currency"]["rate"]) == Decimal("1")


@pytest.mark.parametrize("term", ["99999999999999999999", "-99999999999999999999", "1e40", "1e-40"])
async def test_out_of_range_numeric_search_finds_nothing(client, staff_headers, term):
    await client.post("/orders", json=order_body(), headers=staff_headers)

    resp = await client.get("/orders", params={"search": term}, headers=staff_headers)

    assert resp.status_code == 200
    assert resp.json()["data"] == []


@pytest.mark.parametrize("price", ["10.005", "0.001", "123456789.50"])
async def test_line_price_must_fit_stored_precision(client, staff_headers, price):
    body = order_body()
    body["items"][0]["variant"]["price"] = price
    resp = await client.post("/orders", json=body, headers=staff_headers)
    assert resp.status_code == 400


async def test_saved_lines_add_up_to_subtotal(client, staff_headers):
    body = order_body(tax_included=False)
    body["items"][0]["variant"]["price"] = "10.05"
    body["items"][0]["quantity"] = 3
    order = (await client.post("/orders", json=body, headers=staff_headers)).json()

    again = (await client.get(f"/orders/{order['id']}", headers=staff_headers)).json()
    lines_sum = sum(Decimal(i["price"]) * i["quantity"] for i in again["items"])
    assert lines_sum == Decimal(again["subtotal"]) == Decimal("90.15")


async def test_today_filter_uses_utc_day(client, db, staff_user, staff_headers):
    now = datetime.now(timezone.utc)
    start_of_day = now.replace(hour=0, minute=0, second=1, microsecond=0)
    yesterday = start_of_day - timedelta(seconds=2)
    for name, when in [("Early", start_of_day), ("Late", yesterday)]:
        db.add(
            Order(
                user_id=staff_user.id,
                customer_name=name,
                customer_mobile="1",
                subtotal=Decimal("10"),
                tax=Decimal("0"),
                total=Decimal("10"),
                payment_method=PaymentMethodEnum.cash,
                date=when,
                items=[OrderItem(item_id="1", item_name="Tea", variant_name="Cup", price=Decimal("10"), quantity=1)],
            )
        )
    await db.commit()

    today = (await client.get("/orders", params={"filter_type": "today"}, headers=staff_headers)).json()
    assert [o["customer"]["name"] for o in today["data"]] == ["Early"]
