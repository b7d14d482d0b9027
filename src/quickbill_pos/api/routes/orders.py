import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.api.deps import get_current_user
from quickbill_pos.config import settings
from quickbill_pos.core.pricing import resolve_tax_rate
from quickbill_pos.crud.common import total_pages
from quickbill_pos.crud.order import count_orders, create_order, get_order_by_id, get_orders
from quickbill_pos.crud.profile import get_or_create_profile
from quickbill_pos.db.session import get_async_session
from quickbill_pos.models.user import User
from quickbill_pos.schemas.common import Page
from quickbill_pos.schemas.order import OrderCount, OrderCreate, OrderRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=Page[OrderRead])
async def list_orders(
    page: int = Query(1, ge=1, description="Номер страницы"),
    limit: int = Query(20, ge=0, description="Размер страницы, 0 означает все заказы (для выгрузки CSV)"),
    search: Optional[str] = Query(None, description="Имя клиента, номер заказа или сумма"),
    sort_by: str = Query("date", description="date | total | customer_name | id"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    payment_filter: Literal["all", "cash", "upi", "card"] = Query("all"),
    filter_type: Literal["all", "today", "single", "range"] = Query("all"),
    single_date: Optional[date] = Query(None),
    date_start: Optional[date] = Query(None),
    date_end: Optional[date] = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает заказы текущего пользователя.
    Поддерживает фильтрацию по способу оплаты и дате, поиск, сортировку и пагинацию.
    """
    orders, total = await get_orders(
        db,
        user.id,
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        payment_filter=payment_filter,
        filter_type=filter_type,
        single_date=single_date,
        date_start=date_start,
        date_end=date_end,
    )
    return Page[OrderRead](
        data=[OrderRead.from_orm_order(o) for o in orders],
        page=page if limit else 1,
        total_pages=total_pages(total, limit),
        total=total,
    )


@router.get("/count", response_model=OrderCount)
async def get_orders_count(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    return OrderCount(count=await count_orders(db, user.id))


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: int = Path(..., description="ID заказа"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает детализацию заказа по id. Суммы и валюта такие же, как на момент сохранения.
    """
    order = await get_order_by_id(db, order_id, user_id=user.id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderRead.from_orm_order(order)


@router.post("", response_model=OrderRead, status_code=201)
async def create_order_endpoint(
    order_in: OrderCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Сохраняет оплаченный заказ. Ставка налога берётся из профиля пользователя.
    """
    profile = await get_or_create_profile(db, user.id)
    tax_rate = resolve_tax_rate(profile.tax_rate, settings.DEFAULT_TAX_RATE)

    order = await create_order(db, user.id, order_in, tax_rate)
    logger.info(
        "Order saved: id=%s total=%s payment_method=%s", order.id, order.total, order.payment_method.value
    )
    return OrderRead.from_orm_order(order)
