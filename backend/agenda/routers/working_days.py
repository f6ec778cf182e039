# backend/agenda/routers/working_days.py
# PUT = full replace of the 7-day set, DELETE = 405

from fastapi import APIRouter, Depends
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_business
from ..models.tables import Businesses, WorkingDays as DBWorkingDays
from ..redis_client import get_redis
from ..schemas.working_days import WorkingDayRead, WorkingDayWrite
from ..services.errors import ValidationFailed
from ..services.slots.invalidator import invalidate_business_cache
from ..services.slots.working_hours import InvalidWeek, validate_week

router = APIRouter(prefix="/working-days", tags=["working_days"])


def _list_days(db: Session, business_id: int) -> list[DBWorkingDays]:
    return (
        db.query(DBWorkingDays)
        .filter(DBWorkingDays.business_id == business_id)
        .order_by(DBWorkingDays.day_of_week)
        .all()
    )


@router.get("", response_model=list[WorkingDayRead])
def list_working_days(
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    return _list_days(db, business.id)


@router.put("", response_model=list[WorkingDayRead])
def replace_working_days(
    data: list[WorkingDayWrite],
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    days = [d.model_dump() for d in data]
    try:
        validate_week(days)
    except InvalidWeek as e:
        raise ValidationFailed(str(e), field=e.field) from None

    existing = {d.day_of_week: d for d in _list_days(db, business.id)}
    for day in days:
        row = existing.get(day["day_of_week"])
        if row is None:
            db.add(DBWorkingDays(business_id=business.id, **day))
            continue
        for field, value in day.items():
            setattr(row, field, value)

    db.commit()

    # Invalidate cached windows: the schedule changed
    invalidate_business_cache(redis, business.id)

    return _list_days(db, business.id)
