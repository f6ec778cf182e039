# backend/agenda/schemas/working_days.py

from pydantic import Field, ValidationInfo, field_validator

from ..services.slots.config import time_str_to_minutes
from .base import ApiModel


class WorkingDayWrite(ApiModel):
    day_of_week: int = Field(ge=0, le=6, description="0 = Monday, 6 = Sunday")
    is_open: bool = True
    start_time: str = Field(description="HH:MM")
    end_time: str = Field(description="HH:MM")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        time_str_to_minutes(v)
        return v

    @field_validator("end_time")
    @classmethod
    def validate_order(cls, v: str, info: ValidationInfo) -> str:
        start = info.data.get("start_time")
        if info.data.get("is_open") and start and time_str_to_minutes(start) >= time_str_to_minutes(v):
            raise ValueError("endTime must be after startTime on an open day")
        return v


class WorkingDayRead(ApiModel):
    id: int
    day_of_week: int
    is_open: bool
    start_time: str
    end_time: str
