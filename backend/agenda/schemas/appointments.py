# backend/agenda/schemas/appointments.py

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from .base import ApiModel, NonEmptyStr, same_awareness
from .customers import CustomerRead, normalize_phone
from .services import ServiceRead


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


class AppointmentCreate(ApiModel):
    """
    Booking request.

    Either customer_id, or customer_name + customer_phone for a
    look-up-or-create of the customer. That rule is checked by the
    committer since it depends on stored data.
    """
    start_at: datetime
    end_at: datetime
    service_id: int = Field(gt=0)

    customer_id: Optional[int] = Field(default=None, gt=0)
    customer_name: Optional[NonEmptyStr] = None
    customer_phone: Optional[str] = None

    @field_validator("customer_phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return normalize_phone(v)

    @field_validator("end_at")
    @classmethod
    def validate_end(cls, v: datetime, info: ValidationInfo) -> datetime:
        start = info.data.get("start_at")
        if start is None:
            return v
        if not same_awareness(start, v):
            raise ValueError("startAt and endAt must both have a UTC offset or neither")
        if v <= start:
            raise ValueError("endAt must be after startAt")
        return v


class AppointmentStatusUpdate(ApiModel):
    status: AppointmentStatus


class AppointmentRead(ApiModel):
    id: int
    business_id: int
    customer_id: int
    service_id: int
    start_at: datetime
    end_at: datetime
    status: AppointmentStatus
    created_at: Optional[datetime] = None

    customer: CustomerRead
    service: ServiceRead
