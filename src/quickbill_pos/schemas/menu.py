from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class VariantIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Variant name must not be empty")
        return v


class VariantOut(BaseModel):
    name: str
    price: Decimal

    class Config:
        from_attributes = True


def _check_variants(variants: List[VariantIn]) -> List[VariantIn]:
    if not variants:
        raise ValueError("At least one price variant is required.")
    names = [v.name for v in variants]
    if len(names) != len(set(names)):
        raise ValueError("Variant names must be unique within an item.")
    return variants


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    variants: List[VariantIn]
    image_url: str = Field(..., min_length=1)

    @field_validator("variants")
    @classmethod
    def check_variants(cls, v):
        return _check_variants(v)


class AdminMenuItemCreate(MenuItemCreate):
    user_id: int


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    variants: Optional[List[VariantIn]] = None

    @field_validator("variants")
    @classmethod
    def check_variants(cls, v):
        if v is None:
            return v
        return _check_variants(v)

    class Config:
        extra = "forbid"


class MenuItemRead(BaseModel):
    id: int
    user_id: int
    name: str
    image_url: str
    variants: List[VariantOut]
    created_at: datetime
    owner_username: Optional[str] = None

    @classmethod
    def from_orm_with_owner(cls, item):
        return cls(
            id=item.id,
            user_id=item.user_id,
            name=item.name,
            image_url=item.image_url,
            variants=[VariantOut.model_validate(v) for v in item.variants],
            created_at=item.created_at,
            owner_username=item.user.username if item.user else None,
        )

    class Config:
        from_attributes = True


class DeleteManyRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1)
