# backend/agenda/schemas/absences.py

from datetime import datetime
from typing import Optional

from pydantic import ValidationInfo, field_validator

from .base import ApiModel, same_awareness


class AbsenceCreate(ApiModel):
    start_date: datetime
    end_date: Optional[datetime] = None
    reason: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def validate_end(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        start = info.data.get("start_date")
        if v is None or start is None:
            return v
        if not same_awareness(start, v):
            raise ValueError("startDate and endDate must both have a UTC offset or neither")
        if v <= start:
            raise ValueError("endDate must be after startDate")
        return v


class AbsenceRead(ApiModel):
    id: int
    start_date: datetime
    end_date: Optional[datetime] = None
    reason: Optional[str] = None
