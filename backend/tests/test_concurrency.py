import threading
from datetime import datetime

from agenda.models.tables import Appointments
from agenda.schemas.appointments import AppointmentCreate
from agenda.services.booking import commit_booking
from agenda.services.errors import BOOKED_MESSAGE, Conflict


def _race(session_factory, business_id, requests):
    barrier = threading.Barrier(len(requests))
    outcomes = []
    lock = threading.Lock()

    def worker(data):
        barrier.wait()
        try:
            with session_factory() as db:
                commit_booking(db, business_id, data)
            result = ("ok", None)
        except Conflict as e:
            result = ("conflict", e.message)
        except Exception as e:  # recorded, asserted on below
            result = ("error", repr(e))
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker, args=(data,)) for data in requests]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return outcomes


def test_simultaneous_overlapping_bookings_only_one_wins(session_factory, business_id, service_60):
    requests = [
        AppointmentCreate(
            start_at=datetime(2024, 6, 5, 10, 0),
            end_at=datetime(2024, 6, 5, 11, 0),
            service_id=service_60,
            customer_name=f"Client {i}",
            customer_phone=f"+1555010{i}",
        )
        for i in range(2)
    ]

    outcomes = _race(session_factory, business_id, requests)

    assert sorted(kind for kind, _ in outcomes) == ["conflict", "ok"]
    assert ("conflict", BOOKED_MESSAGE) in outcomes

    with session_factory() as db:
        assert db.query(Appointments).count() == 1


def test_simultaneous_disjoint_bookings_both_succeed(session_factory, business_id, service_60):
    requests = [
        AppointmentCreate(
            start_at=datetime(2024, 6, 5, 9 + 2 * i, 0),
            end_at=datetime(2024, 6, 5, 10 + 2 * i, 0),
            service_id=service_60,
            customer_name="Same Client",
            customer_phone="+15550100",
        )
        for i in range(3)
    ]

    outcomes = _race(session_factory, business_id, requests)

    assert [kind for kind, _ in outcomes] == ["ok", "ok", "ok"]
    with session_factory() as db:
        assert db.query(Appointments).count() == 3


def test_simultaneous_overlapping_requests_over_http(client, headers, session_factory, service_60):
    barrier = threading.Barrier(2)
    responses = []
    lock = threading.Lock()

    def worker(phone):
        body = {
            "startAt": "2024-06-05T10:00:00",
            "endAt": "2024-06-05T11:00:00",
            "serviceId": service_60,
            "customerName": "Client",
            "customerPhone": phone,
        }
        barrier.wait()
        response = client.post("/api/appointments", json=body, headers=headers)
        with lock:
            responses.append((response.status_code, response.json()))

    threads = [threading.Thread(target=worker, args=(f"+1555020{i}",)) for i in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert sorted(code for code, _ in responses) == [201, 409]
    assert (409, {"message": BOOKED_MESSAGE}) in responses

    with session_factory() as db:
        assert db.query(Appointments).count() == 1
