import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.api.deps import require_roles
from quickbill_pos.crud.common import total_pages
from quickbill_pos.crud.menu import (
    create_menu_item,
    delete_menu_item,
    delete_menu_items,
    get_menu_items,
    update_menu_item,
)
from quickbill_pos.db.session import get_async_session
from quickbill_pos.models.user import RoleEnum, User
from quickbill_pos.schemas.common import Page
from quickbill_pos.schemas.menu import DeleteManyRequest, MenuItemCreate, MenuItemRead, MenuItemUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menu", tags=["menu"])

menu_user = require_roles(RoleEnum.admin, RoleEnum.staff)


@router.get("", response_model=Page[MenuItemRead])
async def list_menu(
    page: int = Query(1, ge=1, description="Номер страницы"),
    limit: int = Query(12, ge=0, description="Размер страницы, 0 означает все"),
    search: Optional[str] = Query(None, description="Поиск по названию"),
    sort_by: str = Query("created_at", description="created_at | name | price"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    user: User = Depends(menu_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Меню текущего пользователя с серверной пагинацией, поиском и сортировкой.
    """
    items, total = await get_menu_items(
        db, user.id, page=page, limit=limit, search=search, sort_by=sort_by, sort_order=sort_order
    )
    return Page[MenuItemRead](
        data=[MenuItemRead.from_orm_with_owner(i) for i in items],
        page=page if limit else 1,
        total_pages=total_pages(total, limit),
        total=total,
    )


@router.post("", response_model=MenuItemRead, status_code=201)
async def create_menu_item_endpoint(
    item_in: MenuItemCreate,
    user: User = Depends(menu_user),
    db: AsyncSession = Depends(get_async_session),
):
    item = await create_menu_item(db, user.id, item_in)
    logger.info("Menu item added: id=%s name=%s", item.id, item.name)
    return MenuItemRead.from_orm_with_owner(item)


@router.post("/delete-many", status_code=204)
async def delete_many_endpoint(
    body: DeleteManyRequest,
    user: User = Depends(menu_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Удаляет несколько блюд. Прошлые заказы не затрагиваются: в них хранятся снимки.
    """
    deleted = await delete_menu_items(db, body.ids, user.id)
    logger.info("Deleted %s of %s requested menu items", deleted, len(body.ids))
    return Response(status_code=204)


@router.put("/{item_id}", response_model=MenuItemRead)
async def update_menu_item_endpoint(
    item_in: MenuItemUpdate,
    item_id: int = Path(..., description="ID блюда"),
    user: User = Depends(menu_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Обновляет название и/или варианты цены.
    """
    item = await update_menu_item(db, item_id, user.id, item_in)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found or you do not have permission")
    return MenuItemRead.from_orm_with_owner(item)


@router.delete("/{item_id}", status_code=204)
async def delete_menu_item_endpoint(
    item_id: int = Path(..., description="ID блюда"),
    user: User = Depends(menu_user),
    db: AsyncSession = Depends(get_async_session),
):
    deleted = await delete_menu_item(db, item_id, user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Menu item not found or you do not have permission")
    return Response(status_code=204)
