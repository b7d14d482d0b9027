from pydantic import BaseModel, Field
from datetime import datetime

from quickbill_pos.models.user import RoleEnum


class UserOut(BaseModel):
    id: int
    username: str
    role: RoleEnum
    created_at: datetime

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=4)


class PasswordReset(BaseModel):
    password: str = Field(..., min_length=4)
