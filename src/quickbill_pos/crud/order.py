from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from sqlalchemy import Numeric, select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quickbill_pos.core.currency import get_currency, to_decimal
from quickbill_pos.core.pricing import OrderLine, Variant, compute_totals
from quickbill_pos.crud.common import paginate, resolve_sort
from quickbill_pos.errors import ValidationError
from quickbill_pos.models import Order, OrderItem
from quickbill_pos.schemas.order import OrderCreate


MAX_ORDER_ID = 2**63 - 1

ORDER_SORT_FIELDS = {
    "date": Order.date,
    "total": Order.total,
    "customer_name": Order.customer_name,
    "id": Order.id,
}


def _day_bounds(day: date) -> Tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def _search_conditions(search: str) -> list:
    """
    Поиск по имени клиента. Если строка похожа на число,
    дополнительно ищем по id заказа и по итоговой сумме (с точностью до копеек).
    """
    conditions = [Order.customer_name.icontains(search, autoescape=True)]
    try:
        number = Decimal(search.strip())
    except InvalidOperation:
        return conditions
    if not number.is_finite():
        return conditions

    if number == number.to_integral_value() and abs(number) <= MAX_ORDER_ID:
        conditions.append(Order.id == int(number))
    # total хранится как Numeric(12, 4): больше 8 знаков до запятой не бывает
    if number.adjusted() < 8:
        try:
            cents = number.quantize(Decimal("0.01"))
        except InvalidOperation:
            return conditions
        conditions.append(func.round(Order.total, 2, type_=Numeric(12, 2)) == cents)
    return conditions


async def get_orders(
    db: AsyncSession,
    user_id: int,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    payment_filter: Optional[str] = None,
    filter_type: Optional[str] = None,
    single_date: Optional[date] = None,
    date_start: Optional[date] = None,
    date_end: Optional[date] = None,
) -> Tuple[List[Order], int]:
    """
    Возвращает заказы пользователя с фильтрацией по способу оплаты и дате,
    поиском, сортировкой и пагинацией (limit=0 означает все заказы).
    Подгружаем items.
    """
    stmt = (
        select(Order)
        .where(Order.user_id == user_id)
        .options(selectinload(Order.items))
    )

    if payment_filter and payment_filter != "all":
        stmt = stmt.where(Order.payment_method == payment_filter)

    if filter_type == "today":
        start, end = _day_bounds(datetime.now(timezone.utc).date())
        stmt = stmt.where(Order.date >= start, Order.date < end)
    elif filter_type == "single" and single_date:
        start, end = _day_bounds(single_date)
        stmt = stmt.where(Order.date >= start, Order.date < end)
    elif filter_type == "range" and date_start and date_end:
        start, _ = _day_bounds(date_start)
        _, end = _day_bounds(date_end)
        stmt = stmt.where(Order.date >= start, Order.date < end)

    if search:
        stmt = stmt.where(or_(*_search_conditions(search)))

    stmt = stmt.order_by(resolve_sort(ORDER_SORT_FIELDS, sort_by, "date", sort_order), Order.id.desc())

    return await paginate(db, stmt, page, limit)


async def get_order_by_id(db: AsyncSession, order_id: int, user_id: Optional[int] = None) -> Optional[Order]:
    """
    Возвращает заказ по ID с подгруженными items и user.
    Если передан user_id, чужой заказ не находится.
    """
    stmt = (
        select(Order)
        .where(Order.id == order_id)
        .options(
            selectinload(Order.items),
            selectinload(Order.user),
        )
    )
    if user_id is not None:
        stmt = stmt.where(Order.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalars().unique().first()


async def count_orders(db: AsyncSession, user_id: Optional[int] = None) -> int:
    stmt = select(func.count(Order.id))
    if user_id is not None:
        stmt = stmt.where(Order.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalar_one()


async def create_order(db: AsyncSession, user_id: int, order_in: OrderCreate, tax_rate: Decimal) -> Order:
    """
    Создаём заказ из снимков позиций.
    Суммы считаются заново по ценам из снимков и текущей ставке налога
    и дальше не пересчитываются.
    """
    lines = [
        OrderLine(
            item_id=i.item_id,
            item_name=i.item_name,
            quantity=i.quantity,
            selected_variant=Variant(name=i.variant.name, price=i.variant.price),
            image_url=i.image_url,
        )
        for i in order_in.items
    ]
    keys = [line.key for line in lines]
    if len(keys) != len(set(keys)):
        raise ValidationError("Duplicate order line for the same item and variant")

    currency = get_currency(order_in.currency_code)
    totals = compute_totals(lines, tax_rate, order_in.tax_included)

    order = Order(
        user_id=user_id,
        customer_name=order_in.customer.name,
        customer_mobile=order_in.customer.mobile,
        subtotal=totals.subtotal,
        tax=totals.tax,
        tax_rate=totals.tax_rate,
        total=totals.total,
        currency_code=currency.code,
        currency_symbol=currency.symbol,
        currency_rate=currency.rate,
        payment_method=order_in.payment_method,
        date=datetime.now(timezone.utc),
        items=[
            OrderItem(
                item_id=line.item_id,
                item_name=line.item_name,
                image_url=line.image_url,
                variant_name=line.selected_variant.name,
                price=line.selected_variant.price,
                quantity=line.quantity,
            )
            for line in lines
        ],
    )
    db.add(order)
    await db.commit()

    # загружаем заказ обратно с items
    return await get_order_by_id(db, order.id)


async def get_all_orders(db: AsyncSession, user_id: Optional[int] = None) -> List[Order]:
    """
    Заказы всех пользователей (для администратора), новые первыми.
    """
    stmt = (
        select(Order)
        .options(selectinload(Order.items), selectinload(Order.user))
        .order_by(Order.date.desc(), Order.id.desc())
    )
    if user_id is not None:
        stmt = stmt.where(Order.user_id == user_id)
    result = await db.execute(stmt)
    return list(result.scalars().unique().all())


async def get_recent_orders(db: AsyncSession, limit: int = 5) -> List[Order]:
    stmt = (
        select(Order)
        .options(selectinload(Order.items), selectinload(Order.user))
        .order_by(Order.date.desc(), Order.id.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().unique().all())


async def get_total_revenue(db: AsyncSession) -> Decimal:
    result = await db.execute(select(func.sum(Order.total)))
    return to_decimal(result.scalar() or 0)
