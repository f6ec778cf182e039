# backend/agenda/routers/appointments.py
# POST goes through the booking committer, status PATCH through change_status.
# DELETE is not exposed: appointments are kept for history.
# Every response embeds the customer and the service.

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from ..database import get_db
from ..dependencies import get_current_business
from ..models.tables import Appointments as DBAppointments, Businesses
from ..schemas.appointments import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentStatusUpdate,
)
from ..services.booking import change_status, commit_booking
from ..services.errors import NotFound
from ..services.timezones import to_business_local

router = APIRouter(prefix="/appointments", tags=["appointments"])


def _with_details(db: Session):
    return db.query(DBAppointments).options(
        joinedload(DBAppointments.customer),
        joinedload(DBAppointments.service),
    )


def _get_owned(db: Session, business_id: int, id: int) -> DBAppointments:
    obj = (
        _with_details(db)
        .filter(DBAppointments.id == id, DBAppointments.business_id == business_id)
        .first()
    )
    if not obj:
        raise NotFound("Appointment not found")
    return obj


@router.get("", response_model=list[AppointmentRead])
def list_appointments(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    """Appointments of the business, newest first. start/end bound start_at."""
    query = _with_details(db).filter(DBAppointments.business_id == business.id)
    if start is not None:
        query = query.filter(DBAppointments.start_at >= to_business_local(start, business.timezone))
    if end is not None:
        query = query.filter(DBAppointments.start_at < to_business_local(end, business.timezone))
    return query.order_by(DBAppointments.start_at.desc()).all()


@router.get("/{id}", response_model=AppointmentRead)
def get_appointment(
    id: int,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    return _get_owned(db, business.id, id)


@router.post("", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    appointment = commit_booking(db, business.id, data)
    return _get_owned(db, business.id, appointment.id)


@router.patch("/{id}/status", response_model=AppointmentRead)
def update_appointment_status(
    id: int,
    data: AppointmentStatusUpdate,
    business: Businesses = Depends(get_current_business),
    db: Session = Depends(get_db),
):
    appointment = change_status(db, business.id, id, data.status)
    return _get_owned(db, business.id, appointment.id)
