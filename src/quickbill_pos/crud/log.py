from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quickbill_pos.models import Log
from quickbill_pos.schemas.log import LogCreate


async def create_log(db: AsyncSession, user_id: Optional[int], log_in: LogCreate) -> Log:
    log = Log(level=log_in.level, message=log_in.message, meta=log_in.meta, user_id=user_id)
    db.add(log)
    await db.commit()
    return log


async def get_logs(db: AsyncSession, user_id: Optional[int] = None, limit: int = 200) -> List[Log]:
    """
    Последние записи журнала, новые первыми.
    """
    stmt = (
        select(Log)
        .options(selectinload(Log.user))
        .order_by(Log.timestamp.desc(), Log.id.desc())
        .limit(limit)
    )
    if user_id is not None:
        stmt = stmt.where(Log.user_id == user_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())
