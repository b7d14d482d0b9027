import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.errors import ValidationError
from quickbill_pos.models import User, RoleEnum
from quickbill_pos.security import hash_password

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def get_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def count_users(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(User.id)))
    return result.scalar_one()


async def create_user(
    db: AsyncSession, username: str, password: str, role: RoleEnum = RoleEnum.staff
) -> User:
    if await get_user_by_username(db, username):
        raise ValidationError("User already exists")

    user = User(username=username, password_hash=hash_password(password), role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def reset_password(db: AsyncSession, user: User, password: str) -> User:
    user.password_hash = hash_password(password)
    await db.commit()
    return user


async def ensure_admin(db: AsyncSession, username: str, password: str) -> Optional[User]:
    """
    Создаёт администратора, если в базе нет ни одного.
    """
    result = await db.execute(select(User).where(User.role == RoleEnum.admin).limit(1))
    if result.scalars().first():
        return None

    logger.info("Admin user not found, creating '%s'", username)
    return await create_user(db, username, password, role=RoleEnum.admin)
