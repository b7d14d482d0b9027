import math
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def resolve_sort(sort_map: Dict[str, Any], sort_by: Optional[str], default: str, sort_order: Optional[str]):
    """Неизвестное поле сортировки заменяется на поле по умолчанию."""
    column = sort_map.get(sort_by or default, sort_map[default])
    return column.asc() if sort_order == "asc" else column.desc()


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        return 1
    return math.ceil(total / limit)


async def paginate(db: AsyncSession, stmt: Select, page: int, limit: int) -> Tuple[list, int]:
    """
    Возвращает (строки страницы, общее количество).
    limit=0 означает выгрузку всех строк одной страницей.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    if limit > 0:
        stmt = stmt.offset((max(page, 1) - 1) * limit).limit(limit)

    result = await db.execute(stmt)
    return list(result.scalars().unique().all()), total
