from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.crud.user import get_user
from quickbill_pos.db.session import get_async_session
from quickbill_pos.errors import AuthError, PermissionDeniedError
from quickbill_pos.models.user import RoleEnum, User
from quickbill_pos.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Пользователь из bearer-токена. Любая проблема с токеном: 401.
    """
    if credentials is None:
        raise AuthError("Not authorized, no token")

    payload = decode_access_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthError("Not authorized, token failed")

    user = await get_user(db, user_id)
    if not user:
        raise AuthError("Not authorized, user not found")
    return user


def require_roles(*roles: RoleEnum):
    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise PermissionDeniedError(f"User role '{user.role.value}' is not authorized to access this route")
        return user

    return checker
