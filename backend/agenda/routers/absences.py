# backend/agenda/routers/absences.py
# Append-only: PATCH / DELETE not exposed

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_business
from ..models.tables import Absences as DBAbsences, Businesses
from ..schemas.absences import AbsenceCreate, AbsenceRead
from ..services.errors import ValidationFailed
from ..services.timezones import to_business_local

router = APIRouter(prefix="/absences", tags=["absences"])


@router.get("", response_model=list[AbsenceRead])
def list_absences(
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    return (
        db.query(DBAbsences)
        .filter(DBAbsences.business_id == business.id)
        .order_by(DBAbsences.start_date)
        .all()
    )


@router.post("", response_model=AbsenceRead, status_code=status.HTTP_201_CREATED)
def create_absence(
    data: AbsenceCreate,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    start_date = to_business_local(data.start_date, business.timezone)
    end_date = None
    if data.end_date is not None:
        end_date = to_business_local(data.end_date, business.timezone)
        # Order checked again on local wall-clock time: a DST fall-back
        # can invert a range that was valid as UTC offsets
        if end_date <= start_date:
            raise ValidationFailed(
                "endDate must be after startDate in business local time",
                field="endDate",
            )

    obj = DBAbsences(
        business_id=business.id,
        start_date=start_date,
        end_date=end_date,
        reason=data.reason,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
