from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.api.deps import get_current_user
from quickbill_pos.crud.log import create_log
from quickbill_pos.db.session import get_async_session
from quickbill_pos.models.user import User
from quickbill_pos.schemas.log import LogCreate

router = APIRouter(prefix="/logs", tags=["logs"])


@router.post("", status_code=201)
async def create_log_endpoint(
    log_in: LogCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Приём записи журнала от клиента.
    """
    await create_log(db, user.id, log_in)
    return {"success": True}
