from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.models import Profile
from quickbill_pos.schemas.profile import ProfileUpdate


async def get_or_create_profile(db: AsyncSession, user_id: int) -> Profile:
    """
    Профиль ресторана пользователя. Если его ещё нет, создаётся со значениями по умолчанию.
    """
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    profile = result.scalars().first()
    if profile:
        return profile

    profile = Profile(user_id=user_id)
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def update_profile(db: AsyncSession, user_id: int, profile_in: ProfileUpdate) -> Profile:
    """
    Частичное обновление (upsert): меняются только переданные поля.
    """
    profile = await get_or_create_profile(db, user_id)

    for key, value in profile_in.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(profile, key, value)

    await db.commit()
    await db.refresh(profile)
    return profile
