import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

from decimal import Decimal

import httpx
import pytest
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from quickbill_pos.core.pricing import CatalogItem, Variant
from quickbill_pos.crud.user import create_user
from quickbill_pos.db.base import Base
from quickbill_pos.db.session import get_async_session
from quickbill_pos.main import app
from quickbill_pos.models import RoleEnum
from quickbill_pos.security import create_access_token
import quickbill_pos.models  # noqa: F401


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def session_factory(tmp_path, anyio_backend):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=pool.NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def transport(session_factory):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    yield httpx.ASGITransport(app=app)
    app.dependency_overrides.clear()


@pytest.fixture
async def client(transport):
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def admin_user(db):
    return await create_user(db, "admin", "admin-pass", role=RoleEnum.admin)


@pytest.fixture
async def staff_user(db):
    return await create_user(db, "cashier", "cashier-pass", role=RoleEnum.staff)


@pytest.fixture
async def other_staff_user(db):
    return await create_user(db, "other", "other-pass", role=RoleEnum.staff)


def auth_header(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role.value)}"}


@pytest.fixture
def staff_headers(staff_user):
    return auth_header(staff_user)


@pytest.fixture
def other_headers(other_staff_user):
    return auth_header(other_staff_user)


@pytest.fixture
def admin_headers(admin_user):
    return auth_header(admin_user)


@pytest.fixture
def paneer():
    return CatalogItem(
        id="1",
        name="Paneer Tikka",
        variants=(Variant("Half", Decimal("60")), Variant("Full", Decimal("100"))),
    )


@pytest.fixture
def lassi():
    return CatalogItem(id="2", name="Lassi", variants=(Variant("Regular", Decimal("45")),))
