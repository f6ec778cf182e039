# backend/agenda/routers/businesses.py
# POST /businesses is the only route without caller context: it seeds the
# business and its default week. Everything else works on the caller's business.

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..dependencies import get_current_business
from ..models.tables import Businesses as DBBusinesses, WorkingDays as DBWorkingDays
from ..schemas.businesses import BusinessCreate, BusinessRead, BusinessUpdate
from ..services.slots.working_hours import DEFAULT_WEEK

router = APIRouter(tags=["businesses"])


@router.post("/businesses", response_model=BusinessRead, status_code=status.HTTP_201_CREATED)
def create_business(
    data: BusinessCreate,
    db: Session = Depends(get_db),
):
    obj = DBBusinesses(
        name=data.name,
        timezone=data.timezone or settings.default_timezone,
    )
    db.add(obj)
    db.flush()

    # Exactly one row per weekday from day one
    for day in DEFAULT_WEEK:
        db.add(DBWorkingDays(business_id=obj.id, **day))

    db.commit()
    db.refresh(obj)
    return obj


@router.get("/business", response_model=BusinessRead)
def get_business(business: DBBusinesses = Depends(get_current_business)):
    return business


@router.patch("/business", response_model=BusinessRead)
def update_business(
    data: BusinessUpdate,
    business: DBBusinesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(business, field, value)

    db.commit()
    db.refresh(business)
    return business
