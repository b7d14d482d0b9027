from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ProfileRead(BaseModel):
    id: int
    user_id: int
    restaurant_name: str
    address: str
    phone: str
    logo_url: str
    tax_rate: Decimal

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    restaurant_name: Optional[str] = Field(None, min_length=1, max_length=128)
    address: Optional[str] = Field(None, min_length=1, max_length=256)
    phone: Optional[str] = Field(None, min_length=1, max_length=32)
    logo_url: Optional[str] = Field(None, max_length=512)
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=1)

    class Config:
        extra = "forbid"
