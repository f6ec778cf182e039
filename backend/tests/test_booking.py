from datetime import datetime, timedelta, timezone
from itertools import combinations

import pytest

from agenda.models.tables import Absences, Appointments, Customers
from agenda.schemas.appointments import AppointmentCreate, AppointmentStatus
from agenda.services.booking import change_status, commit_booking
from agenda.services.errors import (
    ABSENT_MESSAGE,
    BOOKED_MESSAGE,
    Conflict,
    NotFound,
    ValidationFailed,
)
from agenda.services.slots.config import BookingConfig

# Wednesday
DAY = datetime(2024, 6, 5)


def at(hour, minute=0):
    return DAY.replace(hour=hour, minute=minute)


def request(service_id, start, end, **extra):
    payload = dict(
        start_at=start,
        end_at=end,
        service_id=service_id,
        customer_name="Jane Doe",
        customer_phone="+1 555 0100",
    )
    payload.update(extra)
    return AppointmentCreate(**payload)


@pytest.fixture
def book(session_factory, business_id):
    def _book(data, config=None):
        with session_factory() as db:
            appointment = commit_booking(db, business_id, data, config=config)
            return appointment.id, appointment.customer_id
    return _book


@pytest.fixture
def add_absence(session_factory, business_id):
    def _add(start, end):
        with session_factory() as db:
            db.add(Absences(business_id=business_id, start_date=start, end_date=end, reason="Away"))
            db.commit()
    return _add


def count(session_factory, model):
    with session_factory() as db:
        return db.query(model).count()


# ------------------ success ------------------
def test_booking_creates_confirmed_appointment_and_customer(session_factory, book, service_60):
    appointment_id, customer_id = book(request(service_60, at(9), at(10)))

    with session_factory() as db:
        appointment = db.get(Appointments, appointment_id)
        customer = db.get(Customers, customer_id)
        assert appointment.status == "CONFIRMED"
        assert appointment.start_at == at(9)
        assert appointment.end_at == at(10)
        assert customer.name == "Jane Doe"
        assert customer.phone == "+15550100"


def test_customer_is_reused_by_normalized_phone(session_factory, book, service_30):
    _, first = book(request(service_30, at(9), at(9, 30)))
    _, second = book(request(service_30, at(10), at(10, 30), customer_phone="+1 (555) 0100"))

    assert first == second
    assert count(session_factory, Customers) == 1


def test_booking_with_existing_customer_id(book, service_30):
    _, customer_id = book(request(service_30, at(9), at(9, 30)))

    _, again = book(
        request(service_30, at(11), at(11, 30), customer_id=customer_id,
                customer_name=None, customer_phone=None)
    )

    assert again == customer_id


def test_touching_appointments_are_allowed(book, service_60):
    book(request(service_60, at(9), at(10)))
    book(request(service_60, at(10), at(11)))
    book(request(service_60, at(8), at(9)))


# ------------------ conflicts ------------------
def test_overlapping_booking_is_rejected(session_factory, book, service_30):
    book(request(service_30, at(9), at(10)))

    with pytest.raises(Conflict) as exc:
        book(request(service_30, at(9, 15), at(9, 45)))

    assert exc.value.message == BOOKED_MESSAGE
    assert exc.value.status_code == 409
    assert count(session_factory, Appointments) == 1


def test_absence_rejects_booking(book, add_absence, service_60):
    add_absence(at(12), at(14))

    with pytest.raises(Conflict) as exc:
        book(request(service_60, at(13), at(14)))

    assert exc.value.message == ABSENT_MESSAGE


def test_absence_reported_before_booked_slot(book, add_absence, service_60):
    book(request(service_60, at(12), at(13)))
    add_absence(at(12), at(14))

    with pytest.raises(Conflict) as exc:
        book(request(service_60, at(12), at(13)))

    assert exc.value.message == ABSENT_MESSAGE


def test_open_ended_absence_follows_config(book, add_absence, service_60):
    add_absence(at(8), None)

    with pytest.raises(Conflict):
        book(request(service_60, at(15), at(16)), config=BookingConfig(open_ended_absence_blocks=True))

    book(request(service_60, at(15), at(16)), config=BookingConfig(open_ended_absence_blocks=False))


def test_canceled_appointment_does_not_block(session_factory, business_id, book, service_60):
    appointment_id, _ = book(request(service_60, at(9), at(10)))
    with session_factory() as db:
        change_status(db, business_id, appointment_id, AppointmentStatus.CANCELED)

    book(request(service_60, at(9), at(10)))


# ------------------ validation ------------------
def test_unknown_service(session_factory, book, business_id):
    with pytest.raises(ValidationFailed) as exc:
        book(request(999, at(9), at(10)))

    assert exc.value.field == "serviceId"
    assert exc.value.message == "Service not found"
    assert count(session_factory, Appointments) == 0


def test_inactive_service_is_unknown(book, make_service):
    inactive = make_service(name="Retired", duration=60, active=False)

    with pytest.raises(ValidationFailed) as exc:
        book(request(inactive, at(9), at(10)))

    assert exc.value.field == "serviceId"


def test_missing_phone_without_customer_id(book, service_60):
    with pytest.raises(ValidationFailed) as exc:
        book(request(service_60, at(9), at(10), customer_phone=None))

    assert exc.value.field == "customerPhone"


def test_unknown_customer_id_creates_nothing(session_factory, book, service_60):
    with pytest.raises(ValidationFailed) as exc:
        book(request(service_60, at(9), at(10), customer_id=4242))

    assert exc.value.field == "customerId"
    assert count(session_factory, Appointments) == 0
    assert count(session_factory, Customers) == 0


def test_unknown_business(session_factory, service_60):
    with session_factory() as db:
        with pytest.raises(NotFound):
            commit_booking(db, 999, request(service_60, at(9), at(10)))


def test_aware_datetimes_are_converted_to_business_time(session_factory, book, service_60):
    plus_two = timezone(timedelta(hours=2))
    appointment_id, _ = book(
        request(service_60, at(11).replace(tzinfo=plus_two), at(12).replace(tzinfo=plus_two))
    )

    with session_factory() as db:
        appointment = db.get(Appointments, appointment_id)
        # Business fixture runs on UTC
        assert appointment.start_at == at(9)
        assert appointment.end_at == at(10)


# ------------------ status changes ------------------
def test_reconfirming_onto_a_newer_booking_is_rejected(session_factory, business_id, book, service_60):
    first, _ = book(request(service_60, at(9), at(10)))
    with session_factory() as db:
        change_status(db, business_id, first, AppointmentStatus.CANCELED)
    book(request(service_60, at(9, 30), at(10, 30)))

    with session_factory() as db:
        with pytest.raises(Conflict) as exc:
            change_status(db, business_id, first, AppointmentStatus.CONFIRMED)
        assert exc.value.message == BOOKED_MESSAGE

    with session_factory() as db:
        assert db.get(Appointments, first).status == "CANCELED"


def test_confirmed_appointment_can_be_completed(session_factory, business_id, book, service_60):
    appointment_id, _ = book(request(service_60, at(9), at(10)))

    with session_factory() as db:
        updated = change_status(db, business_id, appointment_id, AppointmentStatus.COMPLETED)
        assert updated.status == "COMPLETED"


def test_status_change_of_unknown_appointment(session_factory, business_id):
    with session_factory() as db:
        with pytest.raises(NotFound):
            change_status(db, business_id, 12345, AppointmentStatus.CANCELED)


# ------------------ invariant ------------------
def test_confirmed_appointments_never_overlap(session_factory, business_id, book, service_30, service_60):
    attempts = [
        (service_60, at(9), at(10)),
        (service_30, at(9, 30), at(10)),
        (service_30, at(10), at(10, 30)),
        (service_60, at(10, 15), at(11, 15)),
        (service_60, at(11), at(12)),
        (service_30, at(12), at(12, 30)),
        (service_60, at(11, 45), at(12, 45)),
    ]
    for service_id, start, end in attempts:
        try:
            book(request(service_id, start, end))
        except Conflict:
            pass

    with session_factory() as db:
        rows = db.query(Appointments).filter(Appointments.status == "CONFIRMED").all()
        assert len(rows) == 4
        for a, b in combinations(rows, 2):
            assert not (a.start_at < b.end_at and b.start_at < a.end_at)
