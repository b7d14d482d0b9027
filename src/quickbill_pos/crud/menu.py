from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quickbill_pos.crud.common import paginate, resolve_sort
from quickbill_pos.models import MenuItem, MenuItemVariant
from quickbill_pos.schemas.menu import MenuItemCreate, MenuItemUpdate, VariantIn


def _with_relations(stmt):
    return stmt.options(selectinload(MenuItem.variants), selectinload(MenuItem.user))


def _first_variant_price():
    # сортировка по цене идёт по первому варианту
    return (
        select(MenuItemVariant.price)
        .where(MenuItemVariant.menu_item_id == MenuItem.id)
        .order_by(MenuItemVariant.position)
        .limit(1)
        .correlate(MenuItem)
        .scalar_subquery()
    )


def _build_variants(variants: List[VariantIn]) -> List[MenuItemVariant]:
    return [
        MenuItemVariant(position=pos, name=v.name, price=v.price)
        for pos, v in enumerate(variants)
    ]


async def get_menu_items(
    db: AsyncSession,
    user_id: int,
    page: int = 1,
    limit: int = 12,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Tuple[List[MenuItem], int]:
    """
    Меню пользователя с поиском по названию (без учёта регистра),
    сортировкой и пагинацией.
    """
    sort_map = {
        "created_at": MenuItem.created_at,
        "name": MenuItem.name,
        "price": _first_variant_price(),
    }
    stmt = _with_relations(select(MenuItem).where(MenuItem.user_id == user_id))
    if search:
        stmt = stmt.where(MenuItem.name.icontains(search, autoescape=True))
    stmt = stmt.order_by(resolve_sort(sort_map, sort_by, "created_at", sort_order), MenuItem.id)

    return await paginate(db, stmt, page, limit)


async def get_menu_item(db: AsyncSession, item_id: int, user_id: Optional[int] = None) -> Optional[MenuItem]:
    """
    Блюдо по id. Если передан user_id, чужое блюдо не находится.
    """
    stmt = _with_relations(select(MenuItem).where(MenuItem.id == item_id)).execution_options(populate_existing=True)
    if user_id is not None:
        stmt = stmt.where(MenuItem.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalars().unique().first()


async def get_all_menu_items(db: AsyncSession) -> List[MenuItem]:
    stmt = _with_relations(select(MenuItem)).order_by(MenuItem.created_at.desc(), MenuItem.id.desc())
    result = await db.execute(stmt)
    return list(result.scalars().unique().all())


async def count_menu_items(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(MenuItem.id)))
    return result.scalar_one()


async def create_menu_item(db: AsyncSession, user_id: int, item_in: MenuItemCreate) -> MenuItem:
    item = MenuItem(
        user_id=user_id,
        name=item_in.name,
        image_url=item_in.image_url,
        variants=_build_variants(item_in.variants),
    )
    db.add(item)
    await db.commit()

    # загружаем обратно с вариантами и владельцем
    return await get_menu_item(db, item.id)


async def update_menu_item(
    db: AsyncSession, item_id: int, user_id: int, item_in: MenuItemUpdate
) -> Optional[MenuItem]:
    """
    Обновляет название и/или варианты. Варианты заменяются целиком.
    """
    item = await get_menu_item(db, item_id, user_id=user_id)
    if not item:
        return None

    update_data = item_in.model_dump(exclude_unset=True)

    if update_data.get("name") is not None:
        item.name = item_in.name

    if item_in.variants is not None:
        # сначала удаляем старые, иначе упрёмся в уникальность (menu_item_id, name)
        item.variants.clear()
        await db.flush()
        item.variants.extend(_build_variants(item_in.variants))

    await db.commit()
    return await get_menu_item(db, item_id)


async def delete_menu_item(db: AsyncSession, item_id: int, user_id: int) -> bool:
    item = await get_menu_item(db, item_id, user_id=user_id)
    if not item:
        return False
    await db.delete(item)
    await db.commit()
    return True


async def delete_menu_items(db: AsyncSession, ids: List[int], user_id: int) -> int:
    """
    Массовое удаление. Чужие id молча пропускаются.
    """
    owned = (
        await db.execute(select(MenuItem.id).where(MenuItem.id.in_(ids), MenuItem.user_id == user_id))
    ).scalars().all()
    if not owned:
        return 0

    await db.execute(delete(MenuItemVariant).where(MenuItemVariant.menu_item_id.in_(owned)))
    await db.execute(delete(MenuItem).where(MenuItem.id.in_(owned)))
    await db.commit()
    return len(owned)
