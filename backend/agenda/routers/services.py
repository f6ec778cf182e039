# backend/agenda/routers/services.py
# PATCH = ALLOWED, DELETE = soft-delete (active)

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_business
from ..models.tables import Businesses, Services as DBServices
from ..schemas.services import ServiceCreate, ServiceRead, ServiceUpdate
from ..services.errors import NotFound

router = APIRouter(prefix="/services", tags=["services"])


def _get_owned(db: Session, business_id: int, id: int) -> DBServices:
    obj = db.get(DBServices, id)
    if not obj or obj.business_id != business_id:
        raise NotFound("Service not found")
    return obj


@router.get("", response_model=list[ServiceRead])
def list_services(
    include_inactive: bool = False,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    query = db.query(DBServices).filter(DBServices.business_id == business.id)
    if not include_inactive:
        query = query.filter(DBServices.active.is_(True))
    return query.order_by(DBServices.id).all()


@router.get("/{id}", response_model=ServiceRead)
def get_service(
    id: int,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    return _get_owned(db, business.id, id)


@router.post("", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
def create_service(
    data: ServiceCreate,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    obj = DBServices(business_id=business.id, **data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=ServiceRead)
def update_service(
    id: int,
    data: ServiceUpdate,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    obj = _get_owned(db, business.id, id)

    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(
    id: int,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    obj = _get_owned(db, business.id, id)

    # Appointments keep pointing at it
    obj.active = False
    db.commit()
