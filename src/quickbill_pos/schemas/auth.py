from pydantic import BaseModel, Field

from quickbill_pos.schemas.user import UserOut


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
    user: UserOut
