from datetime import datetime, timedelta, timezone

import jwt
import pytest

from quickbill_pos.config import settings
from quickbill_pos.security import create_access_token

pytestmark = pytest.mark.anyio


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_login_returns_token_and_user(client, staff_user):
    resp = await client.post("/auth/login", json={"username": "cashier", "password": "cashier-pass"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["username"] == "cashier"
    assert body["user"]["role"] == "staff"
    assert "password_hash" not in body["user"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == staff_user.id


async def test_login_wrong_password(client, staff_user):
    resp = await client.post("/auth/login", json={"username": "cashier", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


async def test_login_unknown_user(client):
    resp = await client.post("/auth/login", json={"username": "ghost", "password": "x"})
    assert resp.status_code == 401


async def test_login_missing_field_is_400(client):
    resp = await client.post("/auth/login", json={"username": "cashier"})
    assert resp.status_code == 400


async def test_missing_token_is_401(client):
    resp = await client.get("/orders")
    assert resp.status_code == 401


async def test_garbage_token_is_401(client):
    resp = await client.get("/orders", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


async def test_expired_token_is_401(client, staff_user):
    past = datetime.now(timezone.utc) - timedelta(days=2)
    token = jwt.encode(
        {"sub": str(staff_user.id), "role": "staff", "iat": past, "exp": past + timedelta(hours=1)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    resp = await client.get("/orders", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert "expired" in resp.json()["detail"]


async def test_staff_is_forbidden_from_admin_routes(client, staff_headers):
    resp = await client.get("/admin/stats", headers=staff_headers)
    assert resp.status_code == 403


async def test_health_checks_database(client):
    body = (await client.get("/health")).json()
    assert body["database"] == "ok"


async def test_token_timestamps_are_utc(staff_user):
    before = int(datetime.now(timezone.utc).timestamp())
    claims = jwt.decode(
        create_access_token(staff_user.id, "staff"), settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
    )
    after = int(datetime.now(timezone.utc).timestamp())

    assert before <= claims["iat"] <= after
    assert claims["exp"] - claims["iat"] == settings.JWT_EXPIRE_MINUTES * 60
