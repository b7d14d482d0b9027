"""
Сессия оператора: токен, пользователь, профиль и текущий заказ в одном объекте.
Выход (в том числе принудительный по 401) очищает всё производное состояние.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from quickbill_pos.client.api import PosApiClient
from quickbill_pos.core.checkout import CheckoutState, OrderDraft, Register
from quickbill_pos.core.export import orders_to_csv
from quickbill_pos.core.pricing import CatalogItem, Variant
from quickbill_pos.errors import AuthError
from quickbill_pos.models.user import RoleEnum

logger = logging.getLogger(__name__)


def catalog_item_from_json(data: Dict[str, Any]) -> CatalogItem:
    return CatalogItem(
        id=str(data["id"]),
        name=data["name"],
        variants=tuple(Variant(name=v["name"], price=Decimal(str(v["price"]))) for v in data["variants"]),
        image_url=data.get("image_url", ""),
    )


class SessionContext:
    def __init__(self, api: PosApiClient):
        self.api = api
        self.api.on_unauthorized = self.logout
        self.user: Optional[Dict[str, Any]] = None
        self.role: Optional[RoleEnum] = None
        self.profile: Optional[Dict[str, Any]] = None
        self.order_count = 0
        self.register: Optional[Register] = None

    @property
    def is_authenticated(self) -> bool:
        return self.api.token is not None and self.user is not None

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        data = await self.api.post("/auth/login", {"username": username, "password": password})
        self.hydrate(data["token"], data["user"])
        await self.load()
        return self.user

    def hydrate(self, token: str, user: Dict[str, Any]) -> None:
        """Восстановление сохранённой сессии (токен и пользователь)."""
        try:
            role = RoleEnum(user["role"])
        except (KeyError, TypeError, ValueError):
            logger.error("Failed to restore session: bad user data %r", user)
            self.logout()
            raise AuthError("Invalid session data. Please log in again.")

        self.api.token = token
        self.user = user
        self.role = role
        self.register = Register(store=self.save_order)

    async def load(self) -> None:
        """Профиль и количество заказов, нужные всей кассе."""
        self.profile = await self.api.get("/profile")
        self.order_count = (await self.api.get("/orders/count"))["count"]
        self.apply_profile(self.profile)

    def apply_profile(self, profile: Dict[str, Any]) -> None:
        self.profile = profile
        # новая ставка применяется только к заказу, который ещё собирается
        if self.register is not None and self.register.state is CheckoutState.building:
            self.register.set_tax_rate(Decimal(str(profile["tax_rate"])))

    def logout(self) -> None:
        if self.user:
            logger.info("User logging out: %s", self.user.get("username"))
        self.api.token = None
        self.user = None
        self.role = None
        self.profile = None
        self.order_count = 0
        self.register = None

    def home_view(self) -> str:
        match self.role:
            case RoleEnum.admin:
                return "admin"
            case RoleEnum.staff:
                return "menu"
            case None:
                raise AuthError("Not logged in")

    async def save_order(self, draft: OrderDraft) -> Dict[str, Any]:
        saved = await self.api.post("/orders", draft.to_payload())
        self.order_count += 1
        self.api.logger.info(
            "Order saved successfully",
            order_id=saved["id"],
            total=saved["total"],
            payment_method=saved["payment_method"],
        )
        return saved

    async def update_profile(self, **fields: Any) -> Dict[str, Any]:
        profile = await self.api.put("/profile", fields)
        self.apply_profile(profile)
        return profile

    async def fetch_menu(self, **params: Any) -> Dict[str, Any]:
        return await self.api.get("/menu", params=params or None)

    async def fetch_catalog(self, **params: Any) -> list:
        page = await self.fetch_menu(**params)
        return [catalog_item_from_json(i) for i in page["data"]]

    async def export_orders_csv(self, **filters: Any) -> str:
        """Все заказы под текущими фильтрами (limit=0) в CSV."""
        params = {k: v for k, v in filters.items() if v is not None}
        params["limit"] = 0
        page = await self.api.get("/orders", params=params)
        return orders_to_csv(page["data"])
