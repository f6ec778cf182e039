# backend/agenda/schemas/services.py

from typing import Optional

from pydantic import Field

from .base import ApiModel, NonEmptyStr


class ServiceCreate(ApiModel):
    name: NonEmptyStr
    duration_minutes: int = Field(gt=0)
    price: float = Field(ge=0)
    active: bool = True


class ServiceUpdate(ApiModel):
    name: Optional[NonEmptyStr] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)
    active: Optional[bool] = None


class ServiceRead(ApiModel):
    id: int
    business_id: int
    name: str
    duration_minutes: int
    price: float
    active: bool
