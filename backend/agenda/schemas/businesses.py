# backend/agenda/schemas/businesses.py

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator

from ..services.timezones import is_valid_timezone
from .base import ApiModel, NonEmptyStr


def _check_timezone(value: str) -> str:
    if not is_valid_timezone(value):
        raise ValueError(f"Unknown timezone {value!r}")
    return value


TimezoneName = Annotated[str, AfterValidator(_check_timezone)]


class BusinessCreate(ApiModel):
    name: NonEmptyStr
    timezone: Optional[TimezoneName] = None


class BusinessUpdate(ApiModel):
    name: Optional[NonEmptyStr] = None
    timezone: Optional[TimezoneName] = None


class BusinessRead(ApiModel):
    id: int
    name: str
    timezone: str
    created_at: Optional[datetime] = None
