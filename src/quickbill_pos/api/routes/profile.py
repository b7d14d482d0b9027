from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.api.deps import get_current_user, require_roles
from quickbill_pos.crud.profile import get_or_create_profile, update_profile
from quickbill_pos.db.session import get_async_session
from quickbill_pos.models.user import RoleEnum, User
from quickbill_pos.schemas.profile import ProfileRead, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileRead)
async def get_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Профиль ресторана. Создаётся со значениями по умолчанию при первом обращении.
    """
    return await get_or_create_profile(db, user.id)


@router.put("", response_model=ProfileRead)
async def update_profile_endpoint(
    profile_in: ProfileUpdate,
    user: User = Depends(require_roles(RoleEnum.admin, RoleEnum.staff)),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Новая ставка налога действует только на следующие заказы.
    """
    return await update_profile(db, user.id, profile_in)
