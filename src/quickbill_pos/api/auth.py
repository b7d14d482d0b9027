import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill_pos.api.deps import get_current_user
from quickbill_pos.crud.user import get_user_by_username
from quickbill_pos.db.session import get_async_session
from quickbill_pos.errors import AuthError
from quickbill_pos.models.user import User
from quickbill_pos.schemas.auth import LoginRequest, TokenResponse
from quickbill_pos.schemas.user import UserOut
from quickbill_pos.security import create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_async_session)):
    """
    Вход по логину и паролю, возвращает bearer-токен и пользователя.
    """
    user = await get_user_by_username(db, credentials.username)
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning("Failed login attempt for '%s'", credentials.username)
        raise AuthError("Invalid credentials")

    token = create_access_token(user.id, user.role.value)
    return TokenResponse(token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)):
    return user
