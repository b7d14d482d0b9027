import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.db.session import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check(db: AsyncSession = Depends(get_async_session)):
    """
    Проверка сервиса кассы вместе с базой: без базы заказы не сохранить.
    """
    now = datetime.now(timezone.utc)
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.error("Health check: database is unavailable", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": "unavailable", "timestamp": now.isoformat()},
        )
    return {"status": "ok", "database": "ok", "timestamp": now}
