import logging
from decimal import Decimal

import httpx
import pytest

from quickbill_pos.client import PosApiClient, SessionContext, catalog_item_from_json
from quickbill_pos.core.checkout import CheckoutState
from quickbill_pos.core.export import CSV_HEADERS
from quickbill_pos.errors import AuthError, TransientNetworkError, ValidationError

pytestmark = pytest.mark.anyio


@pytest.fixture
async def api(transport):
    async with PosApiClient(base_url="http://test", transport=transport) as client:
        yield client


async def add_dosa(session):
    await session.api.post(
        "/menu",
        {
            "name": "Masala Dosa",
            "image_url": "https://img.example/dosa.jpg",
            "variants": [{"name": "Half", "price": "60"}, {"name": "Full", "price": "100"}],
        },
    )


async def test_login_loads_profile_and_home_view(api, staff_user, admin_user):
    session = SessionContext(api)
    user = await session.login("cashier", "cashier-pass")

    assert user["username"] == "cashier"
    assert session.is_authenticated
    assert session.home_view() == "menu"
    assert session.order_count == 0
    assert session.register.tax_rate == Decimal("0.18")

    session.logout()
    await session.login("admin", "admin-pass")
    assert session.home_view() == "admin"


async def test_bad_login_raises_auth_error(api, staff_user):
    session = SessionContext(api)
    with pytest.raises(AuthError):
        await session.login("cashier", "wrong")
    assert not session.is_authenticated


async def test_full_checkout_flow(api, staff_user):
    session = SessionContext(api)
    await session.login("cashier", "cashier-pass")
    await add_dosa(session)

    [dosa] = await session.fetch_catalog()
    register = session.register
    register.add_line(dosa, dosa.variant("Full"))
    register.add_line(dosa, dosa.variant("Full"))
    register.add_line(dosa, dosa.variant("Half"))
    register.set_customer(name="Asha", mobile="9800000000")
    register.toggle_tax()
    register.set_currency("USD")

    assert register.display_totals() == {"subtotal": "3.12", "tax": "0.56", "total": "3.68"}

    register.proceed_to_payment()
    saved = await register.confirm_payment("upi")

    assert Decimal(saved["total"]) == Decimal("306.8")
    assert saved["currency"]["code"] == "USD"
    assert session.order_count == 1
    assert register.state is CheckoutState.building
    assert register.lines.is_empty()

    csv_text = await session.export_orders_csv(payment_filter="upi")
    header, row = csv_text.strip().split("\n")
    assert header == ",".join(CSV_HEADERS)
    assert row.endswith(",3.68,USD,0.56,upi")


async def test_profile_update_changes_tax_for_current_order(api, staff_user):
    session = SessionContext(api)
    await session.login("cashier", "cashier-pass")

    await session.update_profile(tax_rate="0.05")

    assert session.register.tax_rate == Decimal("0.05")
    assert session.profile["restaurant_name"] == "QuickBill Restaurant"


async def test_validation_error_from_server(api, staff_user):
    session = SessionContext(api)
    await session.login("cashier", "cashier-pass")

    with pytest.raises(ValidationError):
        await api.post("/menu", {"name": "Empty", "image_url": "x", "variants": []})


async def test_unauthorized_response_clears_session(api, staff_user):
    session = SessionContext(api)
    await session.login("cashier", "cashier-pass")

    api.token = "expired-or-garbage"
    with pytest.raises(AuthError):
        await api.get("/orders")

    assert api.token is None
    assert session.user is None
    assert session.register is None
    with pytest.raises(AuthError):
        session.home_view()


async def test_hydrate_rejects_broken_session_data(api):
    session = SessionContext(api)
    with pytest.raises(AuthError):
        session.hydrate("token", {"username": "ghost"})
    assert session.api.token is None


async def test_catalog_item_from_json():
    item = catalog_item_from_json(
        {"id": 5, "name": "Lassi", "variants": [{"name": "Regular", "price": "45.00"}], "image_url": ""}
    )
    assert item.id == "5"
    assert item.variant("Regular").price == Decimal("45")
    assert item.variant("Large") is None


async def test_connection_failure_is_transient_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with PosApiClient(base_url="http://test", transport=httpx.MockTransport(refuse)) as client:
        with pytest.raises(TransientNetworkError, match="Cannot connect to server"):
            await client.get("/orders")


async def test_remote_logger_swallows_send_failures(caplog):
    calls = []

    def broken(request):
        calls.append(request.url.path)
        return httpx.Response(500, json={"detail": "Server Error"})

    async with PosApiClient(base_url="http://test", token="t", transport=httpx.MockTransport(broken)) as client:
        with caplog.at_level(logging.ERROR, logger="quickbill_pos.client.api"):
            client.logger.error("Printer offline", printer="front")
            await client.logger.flush()

    assert calls == ["/logs"]
    assert "Failed to send log to server" in caplog.text


async def test_remote_logger_stays_local_without_token():
    calls = []

    def record(request):
        calls.append(request.url.path)
        return httpx.Response(201, json={"success": True})

    async with PosApiClient(base_url="http://test", transport=httpx.MockTransport(record)) as client:
        client.logger.info("Opened register")
        await client.logger.flush()

    assert calls == []
