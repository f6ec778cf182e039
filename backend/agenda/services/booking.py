# backend/agenda/services/booking.py
"""
Booking committer: the only write path that can make an appointment
CONFIRMED.

One transaction per call:
1. Lock the business row (serialises bookings of one business)
2. Validate service and customer input
3. Reject if an absence overlaps the proposed interval
4. Reject if a CONFIRMED appointment overlaps it
5. Look up or create the customer by (business_id, phone)
6. Insert the appointment as CONFIRMED and commit

The lock is SELECT ... FOR UPDATE on PostgreSQL. SQLite ignores FOR UPDATE,
but every SQLite transaction starts with BEGIN IMMEDIATE (see database.py),
which takes the database write lock up front. Either way two overlapping
requests cannot both pass step 4.

Client-supplied slot lists are never trusted; conflicts are always
re-checked here.
"""

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.tables import Absences, Appointments, Businesses, Customers
from ..schemas.appointments import AppointmentCreate, AppointmentStatus
from .errors import BookingError, Conflict, InternalError, NotFound, ValidationFailed
from .slots.availability import get_active_service
from .slots.config import BookingConfig, get_booking_config
from .slots.intervals import Interval
from .timezones import to_business_local

logger = logging.getLogger(__name__)


def commit_booking(
    db: Session,
    business_id: int,
    data: AppointmentCreate,
    config: BookingConfig | None = None,
) -> Appointments:
    """
    Create a CONFIRMED appointment or raise.

    Raises:
        NotFound: business does not exist
        ValidationFailed: unknown service/customer, missing customer details
        Conflict: absence or overlapping CONFIRMED appointment
        InternalError: storage failure (transaction rolled back)
    """
    config = config or get_booking_config()

    try:
        business = lock_business(db, business_id)

        proposed = _local_interval(data, business.timezone)

        service = get_active_service(db, business_id, data.service_id)
        if not service:
            raise ValidationFailed("Service not found", field="serviceId")

        _check_customer_input(data)

        ensure_no_conflict(db, business_id, proposed, config)

        customer = _resolve_customer(db, business_id, data)

        appointment = Appointments(
            business_id=business_id,
            customer_id=customer.id,
            service_id=service.id,
            start_at=proposed.start,
            end_at=proposed.end,
            status=AppointmentStatus.CONFIRMED.value,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)

    except BookingError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Booking transaction failed for business {business_id}")
        raise InternalError() from e

    logger.info(
        f"Appointment booked: appointment_id={appointment.id}, business_id={business_id}, "
        f"service_id={service.id}, customer_id={customer.id}, "
        f"time={proposed.start:%Y-%m-%d %H:%M}-{proposed.end:%H:%M}"
    )
    return appointment


def change_status(
    db: Session,
    business_id: int,
    appointment_id: int,
    status: AppointmentStatus,
    config: BookingConfig | None = None,
) -> Appointments:
    """
    Move an appointment to another status.

    Entering CONFIRMED re-runs the conflict checks under the business lock,
    so a canceled appointment cannot be revived on top of a newer booking.
    """
    config = config or get_booking_config()

    try:
        lock_business(db, business_id)

        appointment = (
            db.query(Appointments)
            .filter(
                Appointments.id == appointment_id,
                Appointments.business_id == business_id,
            )
            .first()
        )
        if not appointment:
            raise NotFound("Appointment not found")

        previous = appointment.status
        if status == AppointmentStatus.CONFIRMED and previous != AppointmentStatus.CONFIRMED.value:
            ensure_no_conflict(
                db,
                business_id,
                Interval(appointment.start_at, appointment.end_at),
                config,
                exclude_appointment_id=appointment.id,
            )

        appointment.status = status.value
        db.commit()
        db.refresh(appointment)

    except BookingError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Status change failed for appointment {appointment_id}")
        raise InternalError() from e

    logger.info(
        f"Appointment status changed: appointment_id={appointment_id}, "
        f"{previous} → {status.value}"
    )
    return appointment


# ── Checks ───────────────────────────────────────────────────────────────


def _local_interval(data: AppointmentCreate, tz_name: str) -> Interval:
    """
    Proposed interval in business-local wall-clock time.

    A range that is valid as UTC offsets can end up empty or inverted
    once converted across a DST fall-back; that is a client error.
    """
    start = to_business_local(data.start_at, tz_name)
    end = to_business_local(data.end_at, tz_name)
    if end <= start:
        raise ValidationFailed(
            "endAt must be after startAt in business local time",
            field="endAt",
        )
    return Interval(start, end)


def lock_business(db: Session, business_id: int) -> Businesses:
    business = (
        db.query(Businesses)
        .filter(Businesses.id == business_id)
        .with_for_update()
        .first()
    )
    if not business:
        raise NotFound("Business not found")
    return business


def ensure_no_conflict(
    db: Session,
    business_id: int,
    proposed: Interval,
    config: BookingConfig,
    exclude_appointment_id: Optional[int] = None,
) -> None:
    """Raise Conflict if an absence or a CONFIRMED appointment overlaps proposed."""
    absence = _find_absence_conflict(db, business_id, proposed, config.open_ended_absence_blocks)
    if absence is not None:
        logger.info(
            f"Booking rejected: business {business_id} absent "
            f"(absence_id={absence.id}) for {proposed.start} - {proposed.end}"
        )
        raise Conflict.owner_absent()

    clash = _find_appointment_conflict(db, business_id, proposed, exclude_appointment_id)
    if clash is not None:
        logger.info(
            f"Booking rejected: {proposed.start} - {proposed.end} overlaps "
            f"appointment_id={clash.id} of business {business_id}"
        )
        raise Conflict.already_booked()


def _find_absence_conflict(
    db: Session,
    business_id: int,
    proposed: Interval,
    open_ended_blocks: bool,
):
    # Same predicate as Interval.overlaps: a.start < b.end AND b.start < a.end
    query = db.query(Absences).filter(
        Absences.business_id == business_id,
        Absences.start_date < proposed.end,
    )
    if open_ended_blocks:
        query = query.filter(
            or_(Absences.end_date.is_(None), Absences.end_date > proposed.start)
        )
    else:
        query = query.filter(
            Absences.end_date.isnot(None),
            Absences.end_date > proposed.start,
        )
    return query.first()


def _find_appointment_conflict(
    db: Session,
    business_id: int,
    proposed: Interval,
    exclude_appointment_id: Optional[int],
):
    query = db.query(Appointments).filter(
        Appointments.business_id == business_id,
        Appointments.status == AppointmentStatus.CONFIRMED.value,
        Appointments.start_at < proposed.end,
        Appointments.end_at > proposed.start,
    )
    if exclude_appointment_id is not None:
        query = query.filter(Appointments.id != exclude_appointment_id)
    return query.first()


# ── Customer ─────────────────────────────────────────────────────────────


def _check_customer_input(data: AppointmentCreate) -> None:
    if data.customer_id is not None:
        return
    if not data.customer_name:
        raise ValidationFailed(
            "customerName is required when customerId is not given",
            field="customerName",
        )
    if not data.customer_phone:
        raise ValidationFailed(
            "customerPhone is required when customerId is not given",
            field="customerPhone",
        )


def _resolve_customer(db: Session, business_id: int, data: AppointmentCreate) -> Customers:
    """Explicit customer_id, or find-or-create by (business_id, phone)."""
    if data.customer_id is not None:
        customer = (
            db.query(Customers)
            .filter(
                Customers.id == data.customer_id,
                Customers.business_id == business_id,
            )
            .first()
        )
        if not customer:
            raise ValidationFailed("Customer not found", field="customerId")
        return customer

    customer = (
        db.query(Customers)
        .filter(
            Customers.business_id == business_id,
            Customers.phone == data.customer_phone,
        )
        .first()
    )
    if customer:
        return customer

    customer = Customers(
        business_id=business_id,
        name=data.customer_name,
        phone=data.customer_phone,
    )
    db.add(customer)
    db.flush()

    logger.info(f"Created customer: customer_id={customer.id}, business_id={business_id}")
    return customer
