import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.api.deps import require_roles
from quickbill_pos.crud.log import get_logs
from quickbill_pos.crud.menu import count_menu_items, create_menu_item, get_all_menu_items
from quickbill_pos.crud.order import count_orders, get_all_orders, get_recent_orders, get_total_revenue
from quickbill_pos.crud.user import count_users, create_user, get_user, get_users, reset_password
from quickbill_pos.db.session import get_async_session
from quickbill_pos.errors import PermissionDeniedError
from quickbill_pos.models.user import RoleEnum
from quickbill_pos.schemas.admin import AdminStats
from quickbill_pos.schemas.log import LogRead
from quickbill_pos.schemas.menu import AdminMenuItemCreate, MenuItemCreate, MenuItemRead
from quickbill_pos.schemas.order import OrderRead
from quickbill_pos.schemas.user import PasswordReset, UserCreate, UserOut

logger = logging.getLogger(__name__)

# все ручки этого роутера только для администратора
router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_roles(RoleEnum.admin))],
)


@router.get("/stats", response_model=AdminStats)
async def get_stats(db: AsyncSession = Depends(get_async_session)):
    """
    Сводка для панели администратора:
    - количество пользователей, заказов и блюд
    - общая выручка (в базовой валюте)
    - 5 последних заказов
    """
    recent = await get_recent_orders(db, limit=5)
    return AdminStats(
        user_count=await count_users(db),
        order_count=await count_orders(db),
        menu_count=await count_menu_items(db),
        total_revenue=await get_total_revenue(db),
        recent_orders=[OrderRead.from_orm_order(o, with_username=True) for o in recent],
    )


@router.get("/users", response_model=List[UserOut])
async def list_users(db: AsyncSession = Depends(get_async_session)):
    return await get_users(db)


@router.post("/users", response_model=UserOut, status_code=201)
async def create_staff_user(user_in: UserCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Администратор может создавать только сотрудников (staff).
    """
    user = await create_user(db, user_in.username, user_in.password, role=RoleEnum.staff)
    logger.info("Staff user created: %s", user.username)
    return user


@router.put("/users/{user_id}/reset-password")
async def reset_user_password(
    body: PasswordReset,
    user_id: int = Path(..., description="ID пользователя"),
    db: AsyncSession = Depends(get_async_session),
):
    user = await get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.role == RoleEnum.admin:
        raise PermissionDeniedError("Cannot reset password for an admin account")

    await reset_password(db, user, body.password)
    logger.info("Password reset for %s", user.username)
    return {"message": f"Password for {user.username} has been reset."}


@router.get("/orders", response_model=List[OrderRead])
async def list_all_orders(
    user_id: Optional[int] = Query(None, description="Фильтр по пользователю"),
    db: AsyncSession = Depends(get_async_session),
):
    orders = await get_all_orders(db, user_id=user_id)
    return [OrderRead.from_orm_order(o, with_username=True) for o in orders]


@router.get("/menu", response_model=List[MenuItemRead])
async def list_all_menu_items(db: AsyncSession = Depends(get_async_session)):
    items = await get_all_menu_items(db)
    return [MenuItemRead.from_orm_with_owner(i) for i in items]


@router.post("/menu", response_model=MenuItemRead, status_code=201)
async def create_menu_item_for_user(item_in: AdminMenuItemCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Добавляет блюдо в меню указанного пользователя.
    """
    if not await get_user(db, item_in.user_id):
        raise HTTPException(status_code=404, detail="User to assign item to not found.")

    item = await create_menu_item(db, item_in.user_id, MenuItemCreate(**item_in.model_dump(exclude={"user_id"})))
    return MenuItemRead.from_orm_with_owner(item)


@router.get("/logs", response_model=List[LogRead])
async def list_logs(
    user_id: Optional[int] = Query(None, description="Фильтр по пользователю"),
    db: AsyncSession = Depends(get_async_session),
):
    logs = await get_logs(db, user_id=user_id, limit=200)
    return [LogRead.from_orm_with_user(log) for log in logs]
